"""Copy decision and byte-for-byte verification of mirrored files."""

import logging
from typing import Optional

NS_PER_SECOND = 1_000_000_000

# Some filesystems only keep 2 second timestamp resolution.
DEFAULT_THRESHOLD_SECONDS = 10
DEFAULT_CHUNK_SIZE = 1024 * 1024

logger = logging.getLogger(__name__)


def seconds_to_ns(seconds: float) -> int:
    return int(round(seconds * NS_PER_SECOND))


def copy_warranted(source_ns: Optional[int], destination_ns: Optional[int],
                   threshold_ns: int = DEFAULT_THRESHOLD_SECONDS * NS_PER_SECOND) -> bool:
    """Decide whether the destination is stale relative to the source.

    Missing timestamps count as zero, so a destination that does not exist
    is always stale. The comparison is strictly greater-than.
    """
    difference = abs((source_ns or 0) - (destination_ns or 0))
    return difference > threshold_ns


def files_identical(filesystem, source: str, destination: str,
                    chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    """Compare two files byte for byte.

    Sizes are compared first. A file that cannot be opened or read makes
    the pair count as different.
    """
    try:
        if filesystem.file_size(source) != filesystem.file_size(destination):
            return False

        with filesystem.open_for_read(source) as src, \
                filesystem.open_for_read(destination) as dst:
            while True:
                src_chunk = src.read(chunk_size)
                dst_chunk = dst.read(chunk_size)
                if src_chunk != dst_chunk:
                    return False
                if not src_chunk:
                    return True

    except OSError as e:
        logger.debug(f"Could not compare {source} with {destination}: {e}")
        return False
