"""Recursive directory mirroring."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, Optional, Tuple

from .comparison import (DEFAULT_CHUNK_SIZE, DEFAULT_THRESHOLD_SECONDS,
                         copy_warranted, files_identical, seconds_to_ns)
from .filesystem import LocalFileSystem
from .models import CreateStatus, DirectoryEntry, RunStats
from .path_cursor import PathCursor, PathTooLongError

PSEUDO_ENTRIES = (".", "..")


class MirrorWalker:
    """Mirrors a source tree into a destination tree."""

    def __init__(self, filesystem: Optional[LocalFileSystem] = None,
                 threshold_seconds: float = DEFAULT_THRESHOLD_SECONDS,
                 chunk_size: int = DEFAULT_CHUNK_SIZE, workers: int = 1):
        """Initialize mirror walker.

        Args:
            filesystem: Filesystem capability. Defaults to the local filesystem.
            threshold_seconds: Timestamp difference above which a file is copied.
            chunk_size: Read size used when verifying a failed copy.
            workers: Number of threads used for the top-level subdirectories.
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1: {workers}")
        self.filesystem = filesystem or LocalFileSystem()
        self.threshold_ns = seconds_to_ns(threshold_seconds)
        self.chunk_size = chunk_size
        self.workers = workers
        self.logger = logging.getLogger(__name__)

    def mirror(self, source: PathCursor, destination: PathCursor,
               stats: Optional[RunStats] = None) -> RunStats:
        """Mirror ``source`` into a folder of the same name under ``destination``.

        Args:
            source: Cursor at the source root.
            destination: Cursor at the backup root.
            stats: Accumulator to add to. A new one is created if omitted.

        Returns:
            The run's statistics. The root folder is counted once.

        Every folder is counted once it has been visited, including one whose
        subtree was skipped because it could not be created or listed, and
        a root that failed the same way. This is not the same as counting a
        folder only once its listing completes: each skipped folder adds one
        to ``folders_checked_count`` here.
        """
        stats = stats if stats is not None else RunStats()
        target = destination.derive_from_source(source)
        self.logger.info(f"Mirroring {source} -> {target}")

        if self.workers > 1:
            self._walk_parallel(source, target, stats)
        else:
            self.walk(source, target, stats)
        stats.folders_checked_count += 1

        self.logger.info(
            f"Mirror of {source} finished: {stats.files_checked_count} files, "
            f"{stats.folders_checked_count} folders, {stats.copy_success_count} of "
            f"{stats.should_copy_count} copied, {stats.error_count} errors"
        )
        return stats

    def walk(self, source: PathCursor, destination: PathCursor, stats: RunStats) -> None:
        """Mirror one directory level and everything below it."""
        entries = self._open_level(source, destination, stats)
        if entries is None:
            return

        for entry, child_source, child_destination in self._children(source, destination, entries, stats):
            if entry.is_directory:
                self.walk(child_source, child_destination, stats)
                stats.folders_checked_count += 1
            else:
                self.mirror_file(child_source, child_destination, stats, entry.modified_ns)

    def mirror_file(self, source: PathCursor, destination: PathCursor, stats: RunStats,
                    source_ns: Optional[int] = None) -> None:
        """Copy a single file if its destination is stale.

        ``source_ns`` is the timestamp already read while listing; the source
        is only stat'ed again when it is missing.
        """
        if source_ns is None:
            source_ns = self.filesystem.get_last_write_time(source.text)
        destination_ns = self.filesystem.get_last_write_time(destination.text)

        if copy_warranted(source_ns, destination_ns, self.threshold_ns):
            stats.should_copy_count += 1
            try:
                self.filesystem.copy_file(source.text, destination.text)
            except OSError as e:
                self._handle_copy_failure(source, destination, e, stats)
            else:
                stats.copy_success_count += 1
                self.logger.info(f"Copied {source}")

        stats.files_checked_count += 1

    def _handle_copy_failure(self, source: PathCursor, destination: PathCursor,
                             error: OSError, stats: RunStats) -> None:
        reason = error.strerror or str(error)
        if files_identical(self.filesystem, source.text, destination.text, self.chunk_size):
            stats.should_copy_count -= 1
            self.logger.warning(
                f"Copy failed ({reason}) but contents already match: '{source}'"
            )
        else:
            stats.error_count += 1
            self.logger.error(f"{reason} [PATH] '{source}' was not copied")

    def _open_level(self, source: PathCursor, destination: PathCursor,
                    stats: RunStats) -> Optional[Iterable[DirectoryEntry]]:
        """Create the destination directory and list the source one.

        Returns None, after recording one error, when the subtree must be skipped.
        """
        status = self.filesystem.create_directory(destination.text)
        if status in (CreateStatus.PATH_NOT_FOUND, CreateStatus.OTHER_ERROR):
            stats.error_count += 1
            self.logger.error(
                f"Could not create dir '{destination}' ({status.value}). "
                f"This folder and sub folders will not be backed up"
            )
            return None

        try:
            return self.filesystem.list_directory(source.text)
        except OSError as e:
            stats.error_count += 1
            self.logger.error(
                f"Could not list folder '{source}': {e}. "
                f"This folder, its sub folders and all files will not be backed up"
            )
            return None

    def _children(self, source: PathCursor, destination: PathCursor,
                  entries: Iterable[DirectoryEntry],
                  stats: RunStats) -> Iterator[Tuple[DirectoryEntry, PathCursor, PathCursor]]:
        """Yield each real entry with sibling cursors pointing at it."""
        try:
            child_source = source.push_segment(os.sep)
            child_destination = destination.push_segment(os.sep)
        except PathTooLongError as e:
            stats.error_count += 1
            self.logger.error(f"Skipping contents of '{source}': {e}")
            return

        for entry in entries:
            if entry.name in PSEUDO_ENTRIES:
                continue
            try:
                child_source = child_source.pop_last_segment().push_segment(entry.name)
                child_destination = child_destination.pop_last_segment().push_segment(entry.name)
            except PathTooLongError as e:
                stats.error_count += 1
                self.logger.error(f"Skipping '{entry.name}' in '{source}': {e}")
                continue
            yield entry, child_source, child_destination

    def _walk_parallel(self, source: PathCursor, destination: PathCursor, stats: RunStats) -> None:
        """Walk the root level here and each top-level subdirectory in its own thread."""
        entries = self._open_level(source, destination, stats)
        if entries is None:
            return

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = []
            for entry, child_source, child_destination in self._children(source, destination, entries, stats):
                if entry.is_directory:
                    futures.append(executor.submit(self._walk_subtree, child_source, child_destination))
                else:
                    self.mirror_file(child_source, child_destination, stats, entry.modified_ns)

            for future in futures:
                stats.merge(future.result())
                stats.folders_checked_count += 1

    def _walk_subtree(self, source: PathCursor, destination: PathCursor) -> RunStats:
        subtree_stats = RunStats()
        self.walk(source, destination, subtree_stats)
        return subtree_stats
