"""Tests for stream copying and copy/move actions."""

from __future__ import annotations

import errno
import io
import os
from pathlib import Path

import pytest

from treeseek.errors import InvalidOperationError
from treeseek.transfer import (
    OpenFailureError,
    RenameFailureError,
    ShortReadError,
    ShortWriteError,
    TransferOperation,
    copy_file,
    copy_stream,
    move_file,
    transfer,
)


class _StingyWriter(io.RawIOBase):
    """Destination that accepts one byte less than requested once ``after`` bytes passed."""

    def __init__(self, after: int) -> None:
        self.after = after
        self.received = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:  # type: ignore[override]
        if len(self.received) >= self.after:
            accepted = max(len(data) - 1, 0)
        else:
            accepted = len(data)
        self.received.extend(bytes(data[:accepted]))
        return accepted


class _FailingReader(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError(errno.EIO, "Input/output error")


def test_copy_stream_copies_in_chunks() -> None:
    payload = os.urandom(5000)
    source = io.BytesIO(payload)
    destination = io.BytesIO()

    copied = copy_stream(source, destination, chunk_size=1024)

    assert copied == 5000
    assert destination.getvalue() == payload


def test_copy_stream_stops_on_short_write() -> None:
    destination = _StingyWriter(after=1024)

    with pytest.raises(ShortWriteError) as excinfo:
        copy_stream(io.BytesIO(b"a" * 4096), destination, chunk_size=1024)

    assert excinfo.value.expected == 1024
    assert excinfo.value.written == 1023
    assert len(destination.received) == 1024 + 1023


def test_copy_stream_with_limit_reads_exact_length() -> None:
    destination = io.BytesIO()

    copied = copy_stream(io.BytesIO(b"0123456789"), destination, chunk_size=3, limit=7)

    assert copied == 7
    assert destination.getvalue() == b"0123456"


def test_copy_stream_with_limit_reports_short_read() -> None:
    with pytest.raises(ShortReadError) as excinfo:
        copy_stream(io.BytesIO(b"abc"), io.BytesIO(), limit=10)

    assert excinfo.value.read == 3
    assert excinfo.value.expected == 10


def test_copy_stream_wraps_read_errors() -> None:
    with pytest.raises(ShortReadError):
        copy_stream(_FailingReader(), io.BytesIO())


def test_copy_file_duplicates_bytes(tmp_path: Path) -> None:
    source = tmp_path / "source.bin"
    payload = os.urandom(3000)
    source.write_bytes(payload)
    target = tmp_path / "copy.bin"

    assert copy_file(source, target) == 3000

    assert target.read_bytes() == payload
    assert source.read_bytes() == payload


def test_copy_file_missing_source(tmp_path: Path) -> None:
    with pytest.raises(OpenFailureError) as excinfo:
        copy_file(tmp_path / "missing", tmp_path / "out")

    assert excinfo.value.role == "source"
    assert str(excinfo.value).startswith("fopen source file:")
    assert not (tmp_path / "out").exists()


def test_copy_file_unwritable_destination(tmp_path: Path) -> None:
    source = tmp_path / "source.txt"
    source.write_text("data", encoding="utf-8")

    with pytest.raises(OpenFailureError) as excinfo:
        copy_file(source, tmp_path / "no-such-dir" / "out.txt")

    assert excinfo.value.role == "destination"


def test_copy_file_refuses_to_truncate_itself(tmp_path: Path) -> None:
    source = tmp_path / "same.txt"
    source.write_text("keep me", encoding="utf-8")

    with pytest.raises(OpenFailureError):
        copy_file(source, source)

    assert source.read_text(encoding="utf-8") == "keep me"


def test_move_file_renames(tmp_path: Path) -> None:
    source = tmp_path / "from.txt"
    source.write_text("payload", encoding="utf-8")
    target = tmp_path / "to.txt"

    move_file(source, target)

    assert not source.exists()
    assert target.read_text(encoding="utf-8") == "payload"


def test_move_file_does_not_fall_back_across_devices(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "from.txt"
    source.write_text("payload", encoding="utf-8")
    target = tmp_path / "to.txt"

    def _cross_device(src: str, dst: str) -> None:
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(os, "rename", _cross_device)

    with pytest.raises(RenameFailureError) as excinfo:
        move_file(source, target)

    assert excinfo.value.cause.errno == errno.EXDEV
    assert str(excinfo.value).startswith("rename:")
    assert source.read_text(encoding="utf-8") == "payload"
    assert not target.exists()


def test_transfer_operation_from_flag() -> None:
    assert TransferOperation.from_flag("-cp") is TransferOperation.COPY
    assert TransferOperation.from_flag("-mv") is TransferOperation.MOVE
    assert TransferOperation.COPY.verb == "copied"
    assert TransferOperation.MOVE.verb == "moved"

    with pytest.raises(InvalidOperationError):
        TransferOperation.from_flag("-rm")


def test_transfer_dispatches_by_operation(tmp_path: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("a", encoding="utf-8")

    transfer(TransferOperation.COPY, source, tmp_path / "b.txt")
    transfer(TransferOperation.MOVE, source, tmp_path / "c.txt")

    assert not source.exists()
    assert (tmp_path / "b.txt").read_text(encoding="utf-8") == "a"
    assert (tmp_path / "c.txt").read_text(encoding="utf-8") == "a"
