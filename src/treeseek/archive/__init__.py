"""gzip containers for files matched by extension."""

from .bundle import BundleFormatError, BundleMember, BundleWriter, iter_bundle
from .models import ArchiveEntry, ArchiveOutcome, ArchiveSink
from .writer import DEFAULT_COMPRESSION_LEVEL, DEFAULT_CONTAINER_NAME, ArchiveWriter

__all__ = [
    "ArchiveEntry",
    "ArchiveOutcome",
    "ArchiveSink",
    "ArchiveWriter",
    "BundleFormatError",
    "BundleMember",
    "BundleWriter",
    "DEFAULT_COMPRESSION_LEVEL",
    "DEFAULT_CONTAINER_NAME",
    "iter_bundle",
]
