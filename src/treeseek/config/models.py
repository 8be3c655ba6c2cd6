"""Configuration models describing treeseek settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TreeseekBaseModel(BaseModel):
    """Shared configuration for treeseek Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class WalkSettings(TreeseekBaseModel):
    """Directory traversal options.

    Attributes:
        max_open_handles: Maximum number of directory streams held open at once
            during a walk. This bounds descriptors, not depth.
    """

    max_open_handles: int = Field(default=20, ge=1)


class SearchSettings(TreeseekBaseModel):
    """Options for name searches.

    Attributes:
        first_match_only: Stop the walk as soon as the target is found instead of
            acting on every file that carries the same name.
    """

    first_match_only: bool = False


class TransferSettings(TreeseekBaseModel):
    """Options for copy/move transfers.

    Attributes:
        chunk_size: Number of bytes read and written per copy iteration.
    """

    chunk_size: int = Field(default=1024, ge=1)


class ArchiveSettings(TreeseekBaseModel):
    """Options for extension-based archiving.

    Attributes:
        container_name: File name of the gzip container created in the storage directory.
        layout: ``per_match`` rewrites the container for every match; ``bundle`` appends
            every match to one framed container.
        compression_level: gzip compression level.
    """

    container_name: str = Field(default="a1.tar", min_length=1)
    layout: Literal["per_match", "bundle"] = "per_match"
    compression_level: int = Field(default=6, ge=0, le=9)


class LoggingSettings(TreeseekBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class TreeseekConfig(TreeseekBaseModel):
    """Top-level configuration struct for treeseek.

    Attributes:
        walk: Traversal settings.
        search: Name search settings.
        transfer: Copy/move settings.
        archive: Archive container settings.
        logging: Logging configuration.
    """

    walk: WalkSettings = Field(default_factory=WalkSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "TreeseekBaseModel",
    "WalkSettings",
    "SearchSettings",
    "TransferSettings",
    "ArchiveSettings",
    "LoggingSettings",
    "TreeseekConfig",
]
