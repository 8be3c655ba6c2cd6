"""Shared fixtures for treeseek tests."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest
from rich.console import Console

from treeseek.reporting import Reporter


class CapturingReporter(Reporter):
    """Reporter writing into in-memory buffers."""

    def __init__(self) -> None:
        self.out_stream = io.TextIOWrapper(io.BytesIO(), encoding="utf-8", newline="")
        self.err_buffer = io.StringIO()
        super().__init__(
            self.out_stream,
            Console(file=self.err_buffer, highlight=False, emoji=False, soft_wrap=True),
        )

    @property
    def out_lines(self) -> list[str]:
        self.out_stream.flush()
        text = os.fsdecode(self.out_stream.buffer.getvalue())
        return text.split("\n")[:-1]

    @property
    def err_lines(self) -> list[str]:
        return self.err_buffer.getvalue().splitlines()


@pytest.fixture
def reporter() -> CapturingReporter:
    return CapturingReporter()


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str]:
    """Environment with HOME pointed at a temp directory and no TREESEEK__ overrides."""
    env = {key: value for key, value in os.environ.items() if not key.startswith("TREESEEK__")}
    env["HOME"] = str(tmp_path / "home")
    return env
