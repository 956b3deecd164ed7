"""Core mirroring functionality."""

from .path_cursor import PathCursor, PathTooLongError
from .models import CreateStatus, DirectoryEntry, RunStats
from .filesystem import LocalFileSystem
from .comparison import copy_warranted, files_identical
from .walker import MirrorWalker

__all__ = ["PathCursor", "PathTooLongError", "CreateStatus", "DirectoryEntry", "RunStats",
           "LocalFileSystem", "copy_warranted", "files_identical", "MirrorWalker"]
