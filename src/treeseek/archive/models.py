"""Archive value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ArchiveOutcome(str, Enum):
    """Result of handing one matched file to an archive sink."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    TRUNCATED = "truncated"


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """A matched source file handed to an archive sink.

    Attributes:
        source: Full path of the matched file.
        name: Entry name recorded in framed containers (path relative to the walk root).
    """

    source: str
    name: str


class ArchiveSink(Protocol):
    """Destination for matched files during an archive walk."""

    @property
    def container_path(self) -> str: ...

    def add(self, entry: ArchiveEntry) -> ArchiveOutcome: ...

    def close(self) -> None: ...


__all__ = ["ArchiveOutcome", "ArchiveEntry", "ArchiveSink"]
