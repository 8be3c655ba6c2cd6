"""Errors raised while moving bytes or files."""

from __future__ import annotations

from treeseek.errors import TreeseekError


class TransferError(TreeseekError):
    """Base class for per-entry transfer failures."""


class OpenFailureError(TransferError):
    """Raised when a source, destination, or container cannot be opened."""

    def __init__(self, role: str, path: str, cause: OSError) -> None:
        self.role = role
        self.path = path
        self.cause = cause
        prefix = "gzopen" if role == "container" else f"fopen {role} file"
        super().__init__(f"{prefix}: {cause.strerror or cause}")


class ShortWriteError(TransferError):
    """Raised when the destination accepts fewer bytes than were handed to it."""

    def __init__(self, expected: int, written: int | None, cause: OSError | None = None) -> None:
        self.expected = expected
        self.written = written
        self.cause = cause
        if cause is not None:
            message = f"write failed: {cause.strerror or cause}"
        else:
            message = f"short write: {written} of {expected} bytes accepted"
        super().__init__(message)


class ShortReadError(TransferError):
    """Raised when reading the source fails or ends before an expected length."""

    def __init__(self, read: int, expected: int | None = None, cause: OSError | None = None) -> None:
        self.read = read
        self.expected = expected
        self.cause = cause
        if cause is not None:
            message = f"read failed after {read} bytes: {cause.strerror or cause}"
        else:
            message = f"short read: source ended after {read} of {expected} bytes"
        super().__init__(message)


class RenameFailureError(TransferError):
    """Raised when a move cannot be performed as a single rename."""

    def __init__(self, source: str, destination: str, cause: OSError) -> None:
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"rename: {cause.strerror or cause}")
