"""Custom exceptions for configuration management."""

from treeseek.errors import TreeseekError


class ConfigError(TreeseekError):
    """Raised when configuration data cannot be processed."""
