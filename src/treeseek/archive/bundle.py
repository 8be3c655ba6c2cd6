"""Framed multi-entry gzip containers.

A bundle is a single gzip stream holding one frame per matched file::

    [u32 name length][name, filesystem encoding][u64 size][size bytes of content]

All integers are big-endian. The frame header carries just enough to split the
stream back into named entries; there are no permissions, timestamps, or padding
blocks as in tar. Names are stored as the raw bytes the filesystem returned, so
names that are not valid UTF-8 survive the round trip.
"""

from __future__ import annotations

import gzip
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from treeseek.errors import TreeseekError
from treeseek.transfer import OpenFailureError, ShortReadError, ShortWriteError, copy_stream
from treeseek.transfer.streams import DEFAULT_CHUNK_SIZE

from .models import ArchiveEntry, ArchiveOutcome
from .writer import DEFAULT_COMPRESSION_LEVEL

LOGGER = logging.getLogger(__name__)

_NAME_LENGTH = struct.Struct(">I")
_CONTENT_SIZE = struct.Struct(">Q")
_ZEROS = bytes(DEFAULT_CHUNK_SIZE)


class BundleFormatError(TreeseekError):
    """Raised when a bundle stream ends inside a frame."""


@dataclass(frozen=True, slots=True)
class BundleMember:
    """One entry read back from a bundle."""

    name: str
    data: bytes


class BundleWriter:
    """Append every matched file to one gzip container.

    The container is opened on the first :meth:`add`, so a walk without matches
    leaves no file behind. Call :meth:`close` (or use the writer as a context
    manager) once the walk has finished.
    """

    def __init__(
        self,
        container_path: str | os.PathLike[str],
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        compresslevel: int = DEFAULT_COMPRESSION_LEVEL,
    ) -> None:
        self._container_path = os.fspath(container_path)
        self.chunk_size = chunk_size
        self.compresslevel = compresslevel
        self.written = 0
        self._stream: gzip.GzipFile | None = None

    @property
    def container_path(self) -> str:
        return self._container_path

    def __enter__(self) -> "BundleWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add(self, entry: ArchiveEntry) -> ArchiveOutcome:
        """Append ``entry`` as a new frame.

        Returns:
            ArchiveOutcome: ``WRITTEN``; ``SKIPPED`` when the source cannot be opened;
            ``TRUNCATED`` when the source shrank while being read, in which case the
            frame is zero-padded to its declared size.

        Raises:
            OpenFailureError: If the container cannot be opened.
            ShortWriteError: If the compressed stream rejects data.
        """
        try:
            source = open(entry.source, "rb")
        except OSError as exc:
            LOGGER.debug("Skipping unreadable source %s: %s", entry.source, exc)
            return ArchiveOutcome.SKIPPED

        with source:
            stream = self._ensure_open()
            size = os.fstat(source.fileno()).st_size
            encoded = os.fsencode(entry.name)
            header = _NAME_LENGTH.pack(len(encoded)) + encoded + _CONTENT_SIZE.pack(size)
            self._write(stream, header)
            try:
                copy_stream(source, stream, chunk_size=self.chunk_size, limit=size)
            except ShortReadError as exc:
                LOGGER.warning("%s changed while archiving; padding entry: %s", entry.source, exc)
                self._pad(stream, size - exc.read)
                self.written += 1
                return ArchiveOutcome.TRUNCATED

        self.written += 1
        return ArchiveOutcome.WRITTEN

    def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.close()
        except OSError as exc:
            raise ShortWriteError(0, None, cause=exc) from exc

    def _ensure_open(self) -> gzip.GzipFile:
        if self._stream is None:
            try:
                self._stream = gzip.open(
                    self._container_path, "wb", compresslevel=self.compresslevel
                )
            except OSError as exc:
                raise OpenFailureError("container", self._container_path, exc) from exc
        return self._stream

    def _write(self, stream: BinaryIO, data: bytes) -> None:
        try:
            written = stream.write(data)
        except OSError as exc:
            raise ShortWriteError(len(data), None, cause=exc) from exc
        if written != len(data):
            raise ShortWriteError(len(data), written)

    def _pad(self, stream: BinaryIO, remaining: int) -> None:
        while remaining > 0:
            block = _ZEROS[: min(remaining, len(_ZEROS))]
            self._write(stream, block)
            remaining -= len(block)


def iter_bundle(path: str | os.PathLike[str]) -> Iterator[BundleMember]:
    """Yield the members stored in the bundle at ``path`` in write order.

    Raises:
        BundleFormatError: If the stream ends in the middle of a frame.
    """
    with gzip.open(path, "rb") as stream:
        while True:
            prefix = stream.read(_NAME_LENGTH.size)
            if not prefix:
                return
            name_length = _NAME_LENGTH.unpack(_read_exact(stream, _NAME_LENGTH.size, prefix))[0]
            name = os.fsdecode(_read_exact(stream, name_length))
            size = _CONTENT_SIZE.unpack(_read_exact(stream, _CONTENT_SIZE.size))[0]
            yield BundleMember(name=name, data=_read_exact(stream, size))


def _read_exact(stream: BinaryIO, size: int, initial: bytes = b"") -> bytes:
    data = initial
    if len(data) < size:
        data += stream.read(size - len(data))
    if len(data) < size:
        raise BundleFormatError(f"bundle ended after {len(data)} of {size} expected bytes")
    return data


__all__ = ["BundleFormatError", "BundleMember", "BundleWriter", "iter_bundle"]
