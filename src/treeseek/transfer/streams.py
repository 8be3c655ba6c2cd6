"""Chunked byte copying between open binary streams."""

from __future__ import annotations

from typing import BinaryIO

from .errors import ShortReadError, ShortWriteError

DEFAULT_CHUNK_SIZE = 1024


def copy_stream(
    source: BinaryIO,
    destination: BinaryIO,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    limit: int | None = None,
) -> int:
    """Copy bytes from ``source`` to ``destination`` in fixed-size chunks.

    The first write that accepts fewer bytes than it was given ends the copy; nothing
    is retried. Closing either stream is left to the caller.

    Args:
        source: Readable binary stream.
        destination: Writable binary stream.
        chunk_size: Maximum bytes moved per iteration.
        limit: Exact number of bytes to copy. When None, copy until the source is
            exhausted.

    Returns:
        int: Number of bytes written.

    Raises:
        ShortWriteError: If a write is short or fails.
        ShortReadError: If reading fails, or the source ends before ``limit`` bytes.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")

    total = 0
    while limit is None or total < limit:
        size = chunk_size if limit is None else min(chunk_size, limit - total)
        try:
            chunk = source.read(size)
        except OSError as exc:
            raise ShortReadError(total, limit, cause=exc) from exc
        if not chunk:
            break

        try:
            written = destination.write(chunk)
        except OSError as exc:
            raise ShortWriteError(len(chunk), None, cause=exc) from exc
        if written is None or written != len(chunk):
            raise ShortWriteError(len(chunk), written)
        total += written

    if limit is not None and total < limit:
        raise ShortReadError(total, limit)

    try:
        destination.flush()
    except OSError as exc:
        raise ShortWriteError(0, None, cause=exc) from exc
    return total


__all__ = ["DEFAULT_CHUNK_SIZE", "copy_stream"]
