"""Tests for directory validation helpers."""

from pathlib import Path

import pytest

from treeseek.errors import InvalidDirectoryError
from treeseek.paths import destination_path, directory_exists, require_directory


def test_directory_exists_distinguishes_files(tmp_path: Path) -> None:
    regular = tmp_path / "file.txt"
    regular.write_text("x", encoding="utf-8")

    assert directory_exists(tmp_path)
    assert not directory_exists(regular)
    assert not directory_exists(tmp_path / "missing")


def test_directory_exists_follows_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "real"
    target.mkdir()
    link = tmp_path / "link"
    link.symlink_to(target, target_is_directory=True)

    assert directory_exists(link)


def test_require_directory_raises_with_label(tmp_path: Path) -> None:
    with pytest.raises(InvalidDirectoryError, match="Invalid storageDir"):
        require_directory(tmp_path / "missing", label="storageDir")

    assert require_directory(str(tmp_path), label="rootDir") == tmp_path


def test_destination_path_joins_with_slash() -> None:
    assert destination_path("/store", "a.txt") == "/store/a.txt"
    assert destination_path(Path("store"), "b.bin") == "store/b.bin"
