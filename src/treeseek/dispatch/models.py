"""Run parameters and per-walk results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

from treeseek.transfer import TransferOperation


class Mode(str, Enum):
    """What happens to a matching file."""

    REPORT = "report"
    COPY = "copy"
    MOVE = "move"
    ARCHIVE = "archive"

    @classmethod
    def for_transfer(cls, operation: TransferOperation) -> "Mode":
        return cls.COPY if operation is TransferOperation.COPY else cls.MOVE

    @property
    def transfer_operation(self) -> TransferOperation | None:
        if self is Mode.COPY:
            return TransferOperation.COPY
        if self is Mode.MOVE:
            return TransferOperation.MOVE
        return None


class TraversalContext(BaseModel):
    """Parameters fixed before a walk starts and read by every visitor call.

    Attributes:
        root: Directory to walk.
        target: File name to find, or extension substring in archive mode.
        storage_dir: Destination directory for transfers and archives.
        mode: Action applied to matches.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root: str
    target: str
    storage_dir: str | None = None
    mode: Mode = Mode.REPORT


@dataclass(slots=True)
class SearchResult:
    """Mutable outcome accumulated while a walk runs.

    Attributes:
        found_file: Path of the first match; assigned once and never reset.
        matches: Every matched path in traversal order.
        completed: Number of matches whose action (transfer or archive) succeeded.
        errors: Diagnostics for matches whose action failed.
        storage_invalid: True when a transfer found the storage directory missing.
    """

    found_file: str | None = None
    matches: list[str] = field(default_factory=list)
    completed: int = 0
    errors: list[str] = field(default_factory=list)
    storage_invalid: bool = False

    def record_match(self, path: str) -> None:
        self.matches.append(path)
        if self.found_file is None:
            self.found_file = path

    @property
    def found(self) -> bool:
        return self.found_file is not None


__all__ = ["Mode", "TraversalContext", "SearchResult"]
