"""Byte streaming and file transfer actions."""

from .actions import TransferOperation, copy_file, move_file, transfer
from .errors import (
    OpenFailureError,
    RenameFailureError,
    ShortReadError,
    ShortWriteError,
    TransferError,
)
from .streams import DEFAULT_CHUNK_SIZE, copy_stream

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "OpenFailureError",
    "RenameFailureError",
    "ShortReadError",
    "ShortWriteError",
    "TransferError",
    "TransferOperation",
    "copy_file",
    "copy_stream",
    "move_file",
    "transfer",
]
