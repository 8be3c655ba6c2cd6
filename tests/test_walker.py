"""Tests for the physical tree walker."""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Any, Iterator

import pytest

from treeseek.walk import FileCandidate, FileKind, TraversalError, TreeWalker, VisitResult


def _collect(root: Path, **kwargs: Any) -> list[FileCandidate]:
    seen: list[FileCandidate] = []

    def visitor(candidate: FileCandidate) -> int:
        seen.append(candidate)
        return VisitResult.CONTINUE

    assert TreeWalker(**kwargs).walk(root, visitor) == 0
    return seen


def _build_tree(root: Path) -> None:
    (root / "a.txt").write_text("top", encoding="utf-8")
    sub = root / "sub"
    sub.mkdir()
    (sub / "a.txt").write_text("nested", encoding="utf-8")
    (sub / "deeper").mkdir()
    (sub / "deeper" / "b.log").write_text("log", encoding="utf-8")


def test_walk_visits_root_and_every_entry(tmp_path: Path) -> None:
    _build_tree(tmp_path)

    seen = _collect(tmp_path)
    paths = {candidate.path for candidate in seen}

    assert seen[0].path == str(tmp_path)
    assert seen[0].kind is FileKind.DIRECTORY
    assert seen[0].depth == 0
    assert paths == {
        str(tmp_path),
        str(tmp_path / "a.txt"),
        str(tmp_path / "sub"),
        str(tmp_path / "sub" / "a.txt"),
        str(tmp_path / "sub" / "deeper"),
        str(tmp_path / "sub" / "deeper" / "b.log"),
    }
    assert len(seen) == len(paths)


def test_base_offset_points_at_file_name(tmp_path: Path) -> None:
    _build_tree(tmp_path)

    seen = _collect(tmp_path)

    for candidate in seen:
        assert candidate.name == os.path.basename(candidate.path)
    nested = next(c for c in seen if c.path.endswith(os.path.join("deeper", "b.log")))
    assert nested.path[: nested.base] == str(tmp_path / "sub" / "deeper") + os.sep
    assert nested.depth == 3


def test_parents_are_visited_before_children(tmp_path: Path) -> None:
    _build_tree(tmp_path)

    order = [candidate.path for candidate in _collect(tmp_path)]

    assert order.index(str(tmp_path / "sub")) < order.index(str(tmp_path / "sub" / "a.txt"))
    assert order.index(str(tmp_path / "sub" / "deeper")) < order.index(
        str(tmp_path / "sub" / "deeper" / "b.log")
    )


def test_symlinks_are_reported_but_not_followed(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("s", encoding="utf-8")
    root = tmp_path / "root"
    root.mkdir()
    (root / "dir-link").symlink_to(outside, target_is_directory=True)
    (root / "file-link.txt").symlink_to(outside / "secret.txt")

    seen = {candidate.name: candidate.kind for candidate in _collect(root)}

    assert seen["dir-link"] is FileKind.SYMLINK
    assert seen["file-link.txt"] is FileKind.SYMLINK
    assert "secret.txt" not in seen


def test_visitor_stop_ends_walk_and_returns_value(tmp_path: Path) -> None:
    _build_tree(tmp_path)
    seen: list[str] = []

    def visitor(candidate: FileCandidate) -> int:
        seen.append(candidate.path)
        if candidate.kind is FileKind.FILE:
            return VisitResult.STOP
        return VisitResult.CONTINUE

    assert TreeWalker().walk(tmp_path, visitor) == VisitResult.STOP
    assert sum(1 for path in seen if path.endswith(".txt") or path.endswith(".log")) == 1


def test_walk_of_regular_file_reports_only_itself(tmp_path: Path) -> None:
    single = tmp_path / "only.txt"
    single.write_text("x", encoding="utf-8")

    seen = _collect(single)

    assert [(c.name, c.kind) for c in seen] == [("only.txt", FileKind.FILE)]


def test_open_directory_handles_stay_within_bound(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A deep tree is walked completely while never exceeding the handle bound."""
    current = tmp_path
    expected_files = set()
    for level in range(8):
        current = current / f"level{level}"
        current.mkdir()
        for index in range(3):
            leaf = current / f"file{index}.dat"
            leaf.write_bytes(b"x")
            expected_files.add(str(leaf))
        (current / f"side{level}").mkdir()

    state = {"open": 0, "peak": 0}
    real_scandir = os.scandir

    class _Tracked:
        def __init__(self, path: str) -> None:
            self._inner: Any = real_scandir(path)
            state["open"] += 1
            state["peak"] = max(state["peak"], state["open"])

        def __iter__(self) -> Iterator[os.DirEntry[str]]:
            return self

        def __next__(self) -> os.DirEntry[str]:
            return next(self._inner)

        def close(self) -> None:
            if self._inner is not None:
                self._inner.close()
                self._inner = None
                state["open"] -= 1

    monkeypatch.setattr(os, "scandir", _Tracked)

    seen = _collect(tmp_path, max_open_handles=2)
    files = {c.path for c in seen if c.kind is FileKind.FILE}

    assert files == expected_files
    assert state["peak"] <= 2
    assert state["open"] == 0


def test_unreadable_directory_raises_traversal_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _build_tree(tmp_path)
    blocked = str(tmp_path / "sub")
    real_scandir = os.scandir

    def _scandir(path: str) -> Any:
        if path == blocked:
            raise PermissionError(errno.EACCES, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", _scandir)

    with pytest.raises(TraversalError) as excinfo:
        _collect(tmp_path)

    assert excinfo.value.path == blocked
    assert excinfo.value.errno == errno.EACCES


def test_missing_root_raises_traversal_error(tmp_path: Path) -> None:
    with pytest.raises(TraversalError):
        TreeWalker().walk(tmp_path / "missing", lambda candidate: VisitResult.CONTINUE)


def test_max_open_handles_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TreeWalker(max_open_handles=0)
