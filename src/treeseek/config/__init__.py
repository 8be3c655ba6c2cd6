"""Configuration management for treeseek."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import TreeseekConfig
from .resolver import ENV_PREFIX, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.treeseek/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # treeseek configuration file
    # Manage via `treeseek-config edit` or `treeseek-config set`.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve effective settings."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> TreeseekConfig:
        """Resolve settings from defaults, the file, ``TREESEEK__`` variables, and the CLI.

        A missing file contributes nothing; it is never created here.

        Args:
            cli_overrides: Dotted-key overrides supplied on the command line.
            include_env: Whether environment variables participate.
            env_overrides: Environment mapping to use instead of the process environment.

        Returns:
            TreeseekConfig: Validated configuration.

        Raises:
            ConfigError: If the file cannot be parsed or values fail validation.
        """
        env_keys: dict[str, Any] | None = None
        if include_env:
            env_keys = _env_keys(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=TreeseekConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_keys or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk."""
        return self._read_file()

    def save(self, data: Mapping[str, Any]) -> None:
        """Write ``data`` to the file under a header and an update stamp."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Write the default settings unless a file is already present."""
        if not self._config_path.exists():
            self.save(TreeseekConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw


def _env_keys(env: Mapping[str, str]) -> dict[str, Any]:
    """Map ``TREESEEK__WALK__MAX_OPEN_HANDLES=3`` style variables to dotted keys.

    Values are parsed as YAML scalars, so ``true`` and ``3`` arrive typed.
    """
    keys: dict[str, Any] = {}
    for name, raw_value in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        segments = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
        if not segments:
            continue
        try:
            keys[".".join(segments)] = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            keys[".".join(segments)] = raw_value
    return keys


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "TreeseekConfig",
    "resolve_with_precedence",
]
