"""Immutable path values used to track the current position during a walk."""

import os
from dataclasses import dataclass, replace
from typing import Tuple

# Longest path the local platform accepts, minus room for directory creation
# calls that take a shorter limit than file calls.
MAX_PATH_LENGTH = 4096
DIRECTORY_HEADROOM = 12
DEFAULT_MAX_LENGTH = MAX_PATH_LENGTH - DIRECTORY_HEADROOM

OVERFLOW_TRUNCATE = "truncate"
OVERFLOW_ERROR = "error"
OVERFLOW_POLICIES = (OVERFLOW_TRUNCATE, OVERFLOW_ERROR)

SEPARATORS: Tuple[str, ...] = tuple(s for s in (os.sep, os.altsep) if s)


class PathTooLongError(ValueError):
    """Raised when a push would exceed the cursor's capacity."""


def _last_separator(text: str) -> int:
    return max(text.rfind(sep) for sep in SEPARATORS)


@dataclass(frozen=True)
class PathCursor:
    """A path built up one segment at a time.

    Every operation returns a new cursor, so a recursive call that builds
    deeper cursors from the ones it was given never changes what its caller
    holds.
    """
    text: str = ""
    max_length: int = DEFAULT_MAX_LENGTH
    overflow: str = OVERFLOW_TRUNCATE

    def __post_init__(self):
        if self.overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"Invalid overflow policy: {self.overflow}")
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive: {self.max_length}")

    @classmethod
    def from_path(cls, path, max_length: int = DEFAULT_MAX_LENGTH,
                  overflow: str = OVERFLOW_TRUNCATE) -> "PathCursor":
        """Create a cursor positioned at ``path``."""
        return cls("", max_length, overflow).push_segment(os.fspath(path))

    def __str__(self) -> str:
        return self.text

    def __fspath__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)

    def push_segment(self, text: str) -> "PathCursor":
        """Append ``text`` to the path.

        With the ``truncate`` policy anything past ``max_length`` is dropped
        without notice; with ``error`` a PathTooLongError is raised instead.
        """
        room = self.max_length - len(self.text)
        if len(text) > room:
            if self.overflow == OVERFLOW_ERROR:
                raise PathTooLongError(
                    f"Path exceeds {self.max_length} characters: {self.text + text}"
                )
            text = text[:max(room, 0)]
        return replace(self, text=self.text + text)

    def pop_last_segment(self) -> "PathCursor":
        """Drop the last component but keep the separator before it."""
        index = _last_separator(self.text)
        return replace(self, text=self.text[:index + 1])

    def pop_full_level(self) -> "PathCursor":
        """Drop the last component and its separator, giving the parent path."""
        index = _last_separator(self.text)
        if index < 0:
            return replace(self, text="")
        return replace(self, text=self.text[:index] or self.text[:index + 1])

    def derive_from_source(self, source: "PathCursor") -> "PathCursor":
        """Nest this path under a folder named after the last segment of ``source``."""
        _, tail = os.path.splitdrive(source.text)
        tail = tail.rstrip("".join(SEPARATORS))
        name = tail[_last_separator(tail) + 1:]
        if not name:
            return self
        if self.text and not self.text.endswith(SEPARATORS):
            name = os.sep + name
        return self.push_segment(name)
