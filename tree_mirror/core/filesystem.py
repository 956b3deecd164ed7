"""Filesystem operations used by the mirror walker."""

import errno
import logging
import os
import shutil
from typing import BinaryIO, List, Optional

from .models import CreateStatus, DirectoryEntry


class LocalFileSystem:
    """Filesystem capability backed by the local operating system.

    The walker only talks to the filesystem through this class, so tests
    can subclass it to force individual operations to fail.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def create_directory(self, path: str) -> CreateStatus:
        """Create a single directory level.

        Returns:
            CREATED or ALREADY_EXISTS when the directory is usable,
            PATH_NOT_FOUND when a parent is missing, OTHER_ERROR otherwise.
        """
        try:
            os.mkdir(path)
        except FileExistsError:
            if os.path.isdir(path):
                return CreateStatus.ALREADY_EXISTS
            return CreateStatus.OTHER_ERROR
        except FileNotFoundError:
            return CreateStatus.PATH_NOT_FOUND
        except OSError as e:
            if e.errno == errno.ENOENT:
                return CreateStatus.PATH_NOT_FOUND
            self.logger.debug(f"Could not create {path}: {e}")
            return CreateStatus.OTHER_ERROR
        return CreateStatus.CREATED

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """List the immediate children of ``path``.

        Raises:
            OSError: If the directory cannot be read.
        """
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                try:
                    is_directory = entry.is_dir()
                except OSError as e:
                    self.logger.debug(f"Could not check type of {entry.path}: {e}")
                    is_directory = False
                try:
                    modified_ns = entry.stat().st_mtime_ns
                except OSError as e:
                    self.logger.debug(f"Could not stat {entry.path}: {e}")
                    modified_ns = None
                entries.append(DirectoryEntry(entry.name, is_directory, modified_ns))
        return entries

    def get_last_write_time(self, path: str) -> Optional[int]:
        """Last-write time in nanoseconds, or None if the file is absent."""
        try:
            return os.stat(path).st_mtime_ns
        except OSError:
            return None

    def copy_file(self, source: str, destination: str) -> None:
        """Copy a file to exactly ``destination``, keeping its timestamps.

        Raises:
            OSError: If the copy fails, including IsADirectoryError when
                ``destination`` is a folder.
        """
        shutil.copyfile(source, destination)
        shutil.copystat(source, destination)

    def open_for_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def file_size(self, path: str) -> int:
        return os.stat(path).st_size
