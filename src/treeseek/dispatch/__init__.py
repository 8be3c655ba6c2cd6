"""Match dispatch bound to tree walks."""

from .dispatcher import (
    INVALID_STORAGE_MESSAGE,
    ArchiveDispatcher,
    SearchDispatcher,
    run_archive,
    run_search,
)
from .models import Mode, SearchResult, TraversalContext

__all__ = [
    "ArchiveDispatcher",
    "INVALID_STORAGE_MESSAGE",
    "Mode",
    "SearchDispatcher",
    "SearchResult",
    "TraversalContext",
    "run_archive",
    "run_search",
]
