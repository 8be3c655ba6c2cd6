"""Physical depth-first directory traversal with a bounded number of open handles."""

from __future__ import annotations

import logging
import os
import stat
from collections import deque
from typing import Iterator

from .errors import TraversalError
from .models import FileCandidate, FileKind, VisitResult, Visitor

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_OPEN_HANDLES = 20


def _base_offset(path: str) -> int:
    stripped = path.rstrip(os.sep) or path
    return stripped.rfind(os.sep) + 1


def _classify_entry(entry: os.DirEntry[str]) -> FileKind:
    try:
        if entry.is_symlink():
            return FileKind.SYMLINK
        if entry.is_dir(follow_symlinks=False):
            return FileKind.DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return FileKind.FILE
    except OSError as exc:
        LOGGER.debug("Unable to stat %s: %s", entry.path, exc)
    return FileKind.OTHER


def _classify_root(path: str) -> FileKind:
    try:
        mode = os.lstat(path).st_mode
    except OSError as exc:
        raise TraversalError(path, exc) from exc
    if stat.S_ISLNK(mode):
        return FileKind.SYMLINK
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    if stat.S_ISREG(mode):
        return FileKind.FILE
    return FileKind.OTHER


class _DirectoryFrame:
    """One level of the traversal stack.

    A frame either owns an open ``os.scandir`` iterator or, once detached to free
    its descriptor, a buffer holding the entries it had not yet yielded.
    """

    __slots__ = ("path", "depth", "_iterator", "_pending")

    def __init__(self, path: str, depth: int) -> None:
        self.path = path
        self.depth = depth
        self._pending: deque[os.DirEntry[str]] = deque()
        try:
            self._iterator: Iterator[os.DirEntry[str]] | None = os.scandir(path)
        except OSError as exc:
            raise TraversalError(path, exc) from exc

    @property
    def is_open(self) -> bool:
        return self._iterator is not None

    def next_entry(self) -> os.DirEntry[str] | None:
        if self._pending:
            return self._pending.popleft()
        if self._iterator is None:
            return None
        try:
            return next(self._iterator)
        except StopIteration:
            self.close()
            return None
        except OSError as exc:
            raise TraversalError(self.path, exc) from exc

    def detach(self) -> None:
        """Buffer the remaining entries and release the directory handle."""
        if self._iterator is None:
            return
        try:
            self._pending.extend(self._iterator)
        except OSError as exc:
            raise TraversalError(self.path, exc) from exc
        finally:
            self.close()

    def close(self) -> None:
        if self._iterator is not None:
            self._iterator.close()  # type: ignore[attr-defined]
            self._iterator = None


class TreeWalker:
    """Walk a directory tree depth-first without following symbolic links.

    The visitor is called for the root and then for every entry beneath it, parents
    before children. Sibling order is whatever the filesystem returns. At most
    ``max_open_handles`` directory streams are open at any moment; when a deeper
    level needs one more, the shallowest open level is read to the end into memory
    and closed. The bound therefore limits descriptors, not depth.
    """

    def __init__(self, max_open_handles: int = DEFAULT_MAX_OPEN_HANDLES) -> None:
        if max_open_handles < 1:
            raise ValueError("max_open_handles must be at least 1")
        self.max_open_handles = max_open_handles

    def walk(self, root: str | os.PathLike[str], visitor: Visitor) -> int:
        """Traverse ``root`` and feed every entry to ``visitor``.

        Args:
            root: Directory to walk.
            visitor: Callable receiving a FileCandidate; a non-zero return ends the walk.

        Returns:
            int: 0 when the walk completed, otherwise the visitor's non-zero value.

        Raises:
            TraversalError: If a directory cannot be opened or read.
        """
        root_path = os.fspath(root)
        root_kind = _classify_root(root_path)
        signal = visitor(FileCandidate(root_path, root_kind, _base_offset(root_path), 0))
        if signal != VisitResult.CONTINUE:
            return int(signal)
        if root_kind is not FileKind.DIRECTORY:
            return 0

        stack: list[_DirectoryFrame] = []
        try:
            stack.append(_DirectoryFrame(root_path, 1))
            while stack:
                frame = stack[-1]
                entry = frame.next_entry()
                if entry is None:
                    frame.close()
                    stack.pop()
                    continue

                kind = _classify_entry(entry)
                candidate = FileCandidate(
                    path=entry.path,
                    kind=kind,
                    base=len(entry.path) - len(entry.name),
                    depth=frame.depth,
                )
                signal = visitor(candidate)
                if signal != VisitResult.CONTINUE:
                    LOGGER.debug("Walk stopped by visitor at %s", entry.path)
                    return int(signal)

                if kind is FileKind.DIRECTORY:
                    self._release_handle_if_needed(stack)
                    stack.append(_DirectoryFrame(entry.path, frame.depth + 1))
        finally:
            for frame in stack:
                frame.close()
        return 0

    def _release_handle_if_needed(self, stack: list[_DirectoryFrame]) -> None:
        open_frames = [frame for frame in stack if frame.is_open]
        if len(open_frames) < self.max_open_handles:
            return
        oldest = open_frames[0]
        LOGGER.debug("Releasing directory handle for %s", oldest.path)
        oldest.detach()


__all__ = ["TreeWalker", "DEFAULT_MAX_OPEN_HANDLES"]
