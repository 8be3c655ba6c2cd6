"""Traversal errors."""

from __future__ import annotations

from treeseek.errors import TreeseekError


class TraversalError(TreeseekError):
    """Raised when the directory walk cannot proceed.

    Attributes:
        path: Directory or entry whose read failed.
        errno: OS error number reported by the failing call, when available.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        self.errno = cause.errno
        reason = cause.strerror or str(cause)
        super().__init__(f"{path}: {reason}")
