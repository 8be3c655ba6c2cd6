"""Base exception hierarchy shared by treeseek packages."""


class TreeseekError(Exception):
    """Base error for treeseek operations."""


class InvalidDirectoryError(TreeseekError):
    """Raised when a root or storage path is missing or not a directory."""


class InvalidOperationError(TreeseekError):
    """Raised when a transfer flag is neither ``-cp`` nor ``-mv``."""
