"""Value types exchanged between the tree walker and its visitors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Protocol


class FileKind(str, Enum):
    """Type classification of a directory entry, without following symlinks."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


class VisitResult(IntEnum):
    """Visitor return codes. Any non-zero value ends the walk."""

    CONTINUE = 0
    STOP = 1


@dataclass(frozen=True, slots=True)
class FileCandidate:
    """One entry reported by the walker.

    Attributes:
        path: Full path of the entry as built during traversal.
        kind: Entry type classification.
        base: Offset in ``path`` where the base name starts.
        depth: Distance from the walk root (the root itself is 0).
    """

    path: str
    kind: FileKind
    base: int
    depth: int = 0

    @property
    def name(self) -> str:
        """Return the base name portion of ``path``."""
        return self.path[self.base :]

    @property
    def is_file(self) -> bool:
        return self.kind is FileKind.FILE


class Visitor(Protocol):
    """Callable invoked once per walked entry."""

    def __call__(self, candidate: FileCandidate) -> int: ...


__all__ = ["FileKind", "VisitResult", "FileCandidate", "Visitor"]
