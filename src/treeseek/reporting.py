"""User-facing output for walks and transfers."""

from __future__ import annotations

import os
from typing import TextIO

import click
from rich.console import Console


class Reporter:
    """Route match and status lines to stdout and diagnostics to stderr.

    Matched paths are echoed as the raw bytes the filesystem returned, so names
    containing tabs, carriage returns, or undecodable bytes still name the file
    that matched. Diagnostics go through a rich console.
    """

    def __init__(self, out: TextIO | None = None, err: Console | None = None) -> None:
        self.out = out
        self.err = err or Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)

    def match(self, path: str) -> None:
        click.echo(os.fsencode(path), file=self.out)

    def status(self, message: str) -> None:
        click.echo(message, file=self.out)

    def diagnostic(self, message: str) -> None:
        self.err.print(message, markup=False)


__all__ = ["Reporter"]
