"""Directory traversal primitives."""

from .errors import TraversalError
from .models import FileCandidate, FileKind, VisitResult, Visitor
from .walker import DEFAULT_MAX_OPEN_HANDLES, TreeWalker

__all__ = [
    "DEFAULT_MAX_OPEN_HANDLES",
    "FileCandidate",
    "FileKind",
    "TraversalError",
    "TreeWalker",
    "VisitResult",
    "Visitor",
]
