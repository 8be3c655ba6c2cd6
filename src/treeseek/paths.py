"""Directory validation and destination path helpers."""

from __future__ import annotations

import os
from pathlib import Path

from treeseek.errors import InvalidDirectoryError


def directory_exists(path: str | os.PathLike[str]) -> bool:
    """Return True when ``path`` exists and resolves to a directory.

    Symlinks are followed, so a link pointing at a directory counts.
    """
    return os.path.isdir(path)


def require_directory(path: str | os.PathLike[str], *, label: str) -> Path:
    """Return ``path`` as a Path, raising when it is not an existing directory.

    Args:
        path: Candidate directory.
        label: Name used in the error message (``rootDir``, ``storageDir``).

    Raises:
        InvalidDirectoryError: If ``path`` is missing or not a directory.
    """
    if not directory_exists(path):
        raise InvalidDirectoryError(f"Invalid {label}")
    return Path(path)


def destination_path(storage_dir: str | os.PathLike[str], name: str) -> str:
    """Join a storage directory and a file name with a single ``/``."""
    return f"{os.fspath(storage_dir)}/{name}"


__all__ = ["directory_exists", "require_directory", "destination_path"]
