"""Visitors that act on files matched during a tree walk."""

from __future__ import annotations

import logging
import os

from treeseek.archive import ArchiveEntry, ArchiveOutcome, ArchiveSink
from treeseek.paths import destination_path, directory_exists
from treeseek.reporting import Reporter
from treeseek.transfer import (
    DEFAULT_CHUNK_SIZE,
    ShortWriteError,
    TransferError,
    TransferOperation,
    transfer,
)
from treeseek.walk import DEFAULT_MAX_OPEN_HANDLES, FileCandidate, TreeWalker, VisitResult

from .models import Mode, SearchResult, TraversalContext

LOGGER = logging.getLogger(__name__)

INVALID_STORAGE_MESSAGE = "Search Successful: Invalid storageDir"


class SearchDispatcher:
    """Match regular files by exact base name and report or transfer them.

    Every file carrying the target name is acted upon, not just the first one;
    ``SearchResult.found_file`` still keeps the first path. With
    ``first_match_only`` the visitor asks the walker to stop after the first match.
    """

    def __init__(
        self,
        context: TraversalContext,
        result: SearchResult,
        reporter: Reporter,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        first_match_only: bool = False,
    ) -> None:
        if context.mode is Mode.ARCHIVE:
            raise ValueError("SearchDispatcher does not handle archive mode")
        self.context = context
        self.result = result
        self.reporter = reporter
        self.chunk_size = chunk_size
        self.first_match_only = first_match_only

    def __call__(self, candidate: FileCandidate) -> int:
        if not candidate.is_file or candidate.name != self.context.target:
            return VisitResult.CONTINUE

        self.result.record_match(candidate.path)
        operation = self.context.mode.transfer_operation
        if operation is None:
            self.reporter.match(candidate.path)
        else:
            self._transfer(operation, candidate.path)

        if self.first_match_only:
            return VisitResult.STOP
        return VisitResult.CONTINUE

    def _transfer(self, operation: TransferOperation, path: str) -> None:
        storage_dir = self.context.storage_dir
        if storage_dir is None or not directory_exists(storage_dir):
            self.result.storage_invalid = True
            self.reporter.status(INVALID_STORAGE_MESSAGE)
            return

        destination = destination_path(storage_dir, self.context.target)
        try:
            transfer(operation, path, destination, chunk_size=self.chunk_size)
        except TransferError as exc:
            LOGGER.debug("Transfer of %s to %s failed", path, destination, exc_info=exc)
            message = f"fwrite: {exc}" if isinstance(exc, ShortWriteError) else str(exc)
            self.result.errors.append(f"{path}: {message}")
            self.reporter.diagnostic(message)
            return

        self.result.completed += 1
        self.reporter.status("Search Successful")
        self.reporter.status(f"File {operation.verb} to the storageDir")


class ArchiveDispatcher:
    """Match regular files whose base name contains a pattern and archive each one."""

    def __init__(
        self,
        context: TraversalContext,
        result: SearchResult,
        reporter: Reporter,
        sink: ArchiveSink,
    ) -> None:
        if context.mode is not Mode.ARCHIVE:
            raise ValueError("ArchiveDispatcher only handles archive mode")
        self.context = context
        self.result = result
        self.reporter = reporter
        self.sink = sink

    def __call__(self, candidate: FileCandidate) -> int:
        if not candidate.is_file or self.context.target not in candidate.name:
            return VisitResult.CONTINUE

        self.result.record_match(candidate.path)
        self.reporter.match(candidate.path)

        entry = ArchiveEntry(
            source=candidate.path,
            name=os.path.relpath(candidate.path, self.context.root),
        )
        try:
            outcome = self.sink.add(entry)
        except TransferError as exc:
            LOGGER.debug("Archiving %s failed", candidate.path, exc_info=exc)
            message = "Error writing to tar file" if isinstance(exc, ShortWriteError) else str(exc)
            self.result.errors.append(f"{candidate.path}: {message}")
            self.reporter.diagnostic(message)
            return VisitResult.CONTINUE

        if outcome is not ArchiveOutcome.SKIPPED:
            self.result.completed += 1
        return VisitResult.CONTINUE


def run_search(
    context: TraversalContext,
    reporter: Reporter,
    *,
    max_open_handles: int = DEFAULT_MAX_OPEN_HANDLES,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    first_match_only: bool = False,
) -> SearchResult:
    """Walk ``context.root`` once, reporting or transferring files named ``context.target``.

    Raises:
        TraversalError: If the walk cannot read part of the tree.
    """
    result = SearchResult()
    dispatcher = SearchDispatcher(
        context,
        result,
        reporter,
        chunk_size=chunk_size,
        first_match_only=first_match_only,
    )
    TreeWalker(max_open_handles).walk(context.root, dispatcher)
    LOGGER.info("Search for %s matched %d file(s)", context.target, len(result.matches))
    return result


def run_archive(
    context: TraversalContext,
    reporter: Reporter,
    sink: ArchiveSink,
    *,
    max_open_handles: int = DEFAULT_MAX_OPEN_HANDLES,
) -> SearchResult:
    """Walk ``context.root`` once, handing every file containing ``context.target`` to ``sink``.

    The sink is closed when the walk ends, whether or not it completed.

    Raises:
        TraversalError: If the walk cannot read part of the tree.
    """
    result = SearchResult()
    dispatcher = ArchiveDispatcher(context, result, reporter, sink)
    try:
        TreeWalker(max_open_handles).walk(context.root, dispatcher)
    finally:
        sink.close()
    LOGGER.info(
        "Archived %d of %d file(s) matching %s", result.completed, len(result.matches), context.target
    )
    return result


__all__ = [
    "ArchiveDispatcher",
    "INVALID_STORAGE_MESSAGE",
    "SearchDispatcher",
    "run_archive",
    "run_search",
]
