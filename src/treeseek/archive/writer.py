"""Single-entry gzip containers, rewritten for every matched file."""

from __future__ import annotations

import gzip
import logging
import os

from treeseek.transfer import OpenFailureError, ShortReadError, ShortWriteError, copy_stream
from treeseek.transfer.streams import DEFAULT_CHUNK_SIZE

from .models import ArchiveEntry, ArchiveOutcome

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTAINER_NAME = "a1.tar"
DEFAULT_COMPRESSION_LEVEL = 6


class ArchiveWriter:
    """Write each matched file into a fresh gzip stream at ``container_path``.

    Every call to :meth:`add` truncates the container, so after a walk it holds only
    the bytes of the last file that was written. The stream is raw gzip data, not a
    tar archive, whatever the container is called.
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

    @property
    def container_path(self) -> str:
        return self._container_path

    def add(self, entry: ArchiveEntry) -> ArchiveOutcome:
        """Replace the container's content with the gzip-compressed bytes of ``entry``.

        Args:
            entry: Matched file to compress.

        Returns:
            ArchiveOutcome: ``WRITTEN`` on success, ``SKIPPED`` when the source could
            not be read.

        Raises:
            OpenFailureError: If the container cannot be opened.
            ShortWriteError: If the compressed stream rejects data.
        """
        try:
            container = gzip.open(self._container_path, "wb", compresslevel=self.compresslevel)
        except OSError as exc:
            raise OpenFailureError("container", self._container_path, exc) from exc

        try:
            with container:
                outcome = self._stream_source(entry, container)
        except OSError as exc:
            raise ShortWriteError(0, None, cause=exc) from exc

        if outcome is ArchiveOutcome.WRITTEN:
            self.written += 1
        return outcome

    def _stream_source(self, entry: ArchiveEntry, container: gzip.GzipFile) -> ArchiveOutcome:
        try:
            source = open(entry.source, "rb")
        except OSError as exc:
            LOGGER.debug("Skipping unreadable source %s: %s", entry.source, exc)
            return ArchiveOutcome.SKIPPED

        with source:
            try:
                copied = copy_stream(source, container, chunk_size=self.chunk_size)
            except ShortReadError as exc:
                LOGGER.debug("Skipping %s: %s", entry.source, exc)
                return ArchiveOutcome.SKIPPED

        LOGGER.debug("Compressed %d bytes from %s into %s", copied, entry.source, self._container_path)
        return ArchiveOutcome.WRITTEN

    def close(self) -> None:
        """Per-match containers are closed after each entry; nothing stays open."""


__all__ = ["ArchiveWriter", "DEFAULT_CONTAINER_NAME", "DEFAULT_COMPRESSION_LEVEL"]
