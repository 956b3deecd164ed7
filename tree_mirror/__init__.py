"""
Tree Mirror - incremental directory tree backups.

This package mirrors a source directory tree into a backup folder, copying
only files whose modification time has drifted, and logs a summary of each run.
"""

__version__ = "1.0.0"

from .core.path_cursor import PathCursor
from .core.models import RunStats
from .core.walker import MirrorWalker
from .core.runner import MirrorRunner

__all__ = ["PathCursor", "RunStats", "MirrorWalker", "MirrorRunner"]
