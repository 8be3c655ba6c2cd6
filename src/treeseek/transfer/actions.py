"""Copy and move actions applied to a located file."""

from __future__ import annotations

import errno
import logging
import os
from enum import Enum

from treeseek.errors import InvalidOperationError

from .errors import OpenFailureError, RenameFailureError
from .streams import DEFAULT_CHUNK_SIZE, copy_stream

LOGGER = logging.getLogger(__name__)


class TransferOperation(str, Enum):
    """Transfer requested on the command line."""

    COPY = "-cp"
    MOVE = "-mv"

    @classmethod
    def from_flag(cls, flag: str) -> "TransferOperation":
        """Return the operation for ``flag``.

        Raises:
            InvalidOperationError: If ``flag`` is not ``-cp`` or ``-mv``.
        """
        for operation in cls:
            if operation.value == flag:
                return operation
        raise InvalidOperationError("Invalid operation")

    @property
    def verb(self) -> str:
        return "copied" if self is TransferOperation.COPY else "moved"


def copy_file(
    src: str | os.PathLike[str],
    dst: str | os.PathLike[str],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Duplicate ``src`` at ``dst`` through a chunked stream copy.

    Returns:
        int: Number of bytes copied.

    Raises:
        OpenFailureError: If either file cannot be opened.
        ShortWriteError: If the destination rejects part of a chunk.
        ShortReadError: If reading the source fails midway.
    """
    try:
        source = open(src, "rb")
    except OSError as exc:
        raise OpenFailureError("source", os.fspath(src), exc) from exc

    with source:
        if os.path.exists(dst) and os.path.samefile(src, dst):
            same = OSError(errno.EINVAL, "source and destination are the same file")
            raise OpenFailureError("destination", os.fspath(dst), same)
        try:
            destination = open(dst, "wb")
        except OSError as exc:
            raise OpenFailureError("destination", os.fspath(dst), exc) from exc
        with destination:
            copied = copy_stream(source, destination, chunk_size=chunk_size)

    LOGGER.debug("Copied %d bytes from %s to %s", copied, src, dst)
    return copied


def move_file(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Rename ``src`` to ``dst``. Cross-device moves fail; there is no copy fallback.

    Raises:
        RenameFailureError: If the rename is rejected.
    """
    try:
        os.rename(src, dst)
    except OSError as exc:
        raise RenameFailureError(os.fspath(src), os.fspath(dst), exc) from exc
    LOGGER.debug("Renamed %s to %s", src, dst)


def transfer(
    operation: TransferOperation,
    src: str | os.PathLike[str],
    dst: str | os.PathLike[str],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Apply ``operation`` to move or duplicate ``src`` at ``dst``."""
    if operation is TransferOperation.COPY:
        copy_file(src, dst, chunk_size=chunk_size)
    else:
        move_file(src, dst)


__all__ = ["TransferOperation", "copy_file", "move_file", "transfer"]
