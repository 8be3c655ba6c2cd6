"""Command line interface for treeseek."""

from __future__ import annotations

import difflib
import os
from pathlib import Path
from typing import Any, NoReturn, Sequence

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax

from treeseek.archive import ArchiveWriter, BundleWriter
from treeseek.config import ConfigError, ConfigManager, TreeseekConfig, resolve_with_precedence
from treeseek.dispatch import (
    INVALID_STORAGE_MESSAGE,
    Mode,
    SearchResult,
    TraversalContext,
    run_archive,
    run_search,
)
from treeseek.errors import InvalidDirectoryError, InvalidOperationError
from treeseek.log_config import configure_logging
from treeseek.paths import destination_path, directory_exists, require_directory
from treeseek.reporting import Reporter
from treeseek.transfer import TransferError, TransferOperation
from treeseek.walk import TraversalError

console = Console()

USAGE = """\b
  treeseek ROOT NAME                 print the path of NAME found under ROOT
  treeseek ROOT STORAGE -cp NAME     copy NAME into STORAGE
  treeseek ROOT STORAGE -mv NAME     move NAME into STORAGE
  treeseek ROOT STORAGE EXT          gzip each file whose name contains EXT
"""


def _fail(reporter: Reporter, message: str) -> NoReturn:
    """Print ``message`` to stderr and terminate with exit status 1."""
    reporter.diagnostic(message)
    raise SystemExit(1)


def _load_config(
    config_path: Path | None,
    *,
    first_match_only: bool,
    bundle: bool,
) -> TreeseekConfig:
    """Resolve configuration from disk, environment, and CLI flags.

    Raises:
        click.ClickException: If the configuration is invalid.
    """
    overrides: dict[str, Any] = {}
    if first_match_only:
        overrides["search.first_match_only"] = True
    if bundle:
        overrides["archive.layout"] = "bundle"

    try:
        return ConfigManager(config_path).load(cli_overrides=overrides or None)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _build_context(args: Sequence[str], reporter: Reporter) -> TraversalContext:
    """Translate positional arguments into a validated TraversalContext.

    Exits with status 1 when the argument count, a directory, or the operation
    flag is invalid.
    """
    if len(args) not in (2, 3, 4):
        _fail(reporter, "Invalid number of arguments")

    root = args[0]
    if len(args) == 3:
        storage_dir, pattern = args[1], args[2]
        root_ok = directory_exists(root)
        storage_ok = directory_exists(storage_dir)
        if not root_ok:
            reporter.diagnostic("Invalid rootDir")
        if not storage_ok:
            reporter.diagnostic(INVALID_STORAGE_MESSAGE)
        if not (root_ok and storage_ok):
            raise SystemExit(1)
        return TraversalContext(
            root=os.path.abspath(root),
            target=pattern,
            storage_dir=storage_dir,
            mode=Mode.ARCHIVE,
        )

    try:
        require_directory(root, label="rootDir")
        if len(args) == 2:
            return TraversalContext(root=os.path.abspath(root), target=args[1])
        operation = TransferOperation.from_flag(args[2])
    except (InvalidDirectoryError, InvalidOperationError) as exc:
        _fail(reporter, str(exc))

    return TraversalContext(
        root=os.path.abspath(root),
        target=args[3],
        storage_dir=args[1],
        mode=Mode.for_transfer(operation),
    )


def _run(context: TraversalContext, settings: TreeseekConfig, reporter: Reporter) -> SearchResult:
    if context.mode is not Mode.ARCHIVE:
        return run_search(
            context,
            reporter,
            max_open_handles=settings.walk.max_open_handles,
            chunk_size=settings.transfer.chunk_size,
            first_match_only=settings.search.first_match_only,
        )

    assert context.storage_dir is not None
    container = destination_path(context.storage_dir, settings.archive.container_name)
    writer_cls = BundleWriter if settings.archive.layout == "bundle" else ArchiveWriter
    sink = writer_cls(
        container,
        chunk_size=settings.transfer.chunk_size,
        compresslevel=settings.archive.compression_level,
    )
    return run_archive(context, reporter, sink, max_open_handles=settings.walk.max_open_handles)


@click.command(
    context_settings={"help_option_names": ["--help"], "ignore_unknown_options": True},
    epilog=USAGE,
)
@click.version_option(package_name="treeseek")
@click.option(
    "--first-match-only",
    is_flag=True,
    help="Stop walking after the first file with the requested name.",
)
@click.option(
    "--bundle",
    is_flag=True,
    help="Archive mode: append every match to one framed container instead of rewriting it.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to use instead of ~/.treeseek/config.yaml.",
)
@click.option("--verbose", is_flag=True, help="Emit debug logging on stderr.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    first_match_only: bool,
    bundle: bool,
    config_path: Path | None,
    verbose: bool,
    args: tuple[str, ...],
) -> None:
    """Find a file by name under a directory tree, then report, copy, or move it.

    With three positional arguments, gzip every file whose name contains EXT into
    STORAGE/a1.tar instead.
    """
    settings = _load_config(config_path, first_match_only=first_match_only, bundle=bundle)
    configure_logging(settings.logging, verbose=verbose)
    reporter = Reporter()

    context = _build_context(args, reporter)

    try:
        result = _run(context, settings, reporter)
    except TraversalError as exc:
        _fail(reporter, f"walk: {exc}")
    except TransferError as exc:
        _fail(reporter, str(exc))

    if context.mode is not Mode.ARCHIVE and not result.found:
        reporter.status("Search Unsuccessful")
    if result.storage_invalid:
        raise SystemExit(1)


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="treeseek")
def config() -> None:
    """Manage treeseek configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'walk.max_open_handles'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=TreeseekConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    changed = [
        line
        for line in diff
        if line[:1] in ("+", "-") and not line.startswith(("+++", "---", "+#", "-#"))
    ]
    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=TreeseekConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


__all__ = ["cli", "config"]
