"""Tokenizing and incremental full-text search."""

from .index import (
    DEFAULT_MAX_HITS,
    DEFAULT_SNIPPET_RADIUS,
    CorpusIndex,
    IndexProgress,
    SearchHit,
    build_snippet,
    search_single_revision,
)
from .tokens import tokenize

__all__ = [
    "CorpusIndex",
    "DEFAULT_MAX_HITS",
    "DEFAULT_SNIPPET_RADIUS",
    "IndexProgress",
    "SearchHit",
    "build_snippet",
    "search_single_revision",
    "tokenize",
]
