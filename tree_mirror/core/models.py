"""Data models for mirror runs."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional


class CreateStatus(Enum):
    """Outcome of a create-directory call."""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    PATH_NOT_FOUND = "path_not_found"
    OTHER_ERROR = "other_error"


@dataclass
class DirectoryEntry:
    """A single child of a listed directory."""
    name: str
    is_directory: bool
    modified_ns: Optional[int] = None


@dataclass
class RunStats:
    """Counters accumulated over one mirror run.

    Holds ``copy_success_count <= should_copy_count <= files_checked_count``
    at every point the walker hands control back to its caller.
    """
    files_checked_count: int = 0
    folders_checked_count: int = 0
    should_copy_count: int = 0
    copy_success_count: int = 0
    error_count: int = 0

    def merge(self, other: "RunStats") -> "RunStats":
        """Add another accumulator's counters into this one."""
        self.files_checked_count += other.files_checked_count
        self.folders_checked_count += other.folders_checked_count
        self.should_copy_count += other.should_copy_count
        self.copy_success_count += other.copy_success_count
        self.error_count += other.error_count
        return self

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)
