"""Revision corpus model, loading and snapshot helpers."""

from .loader import CorpusFormatError, load_corpus
from .models import (
    MAX_BUCKET,
    MIN_BUCKET,
    UNLABELED_BUCKET,
    UNREVIEWED_BUCKET,
    ChangeGroup,
    Corpus,
    NumStat,
    ReviewRecord,
    Revision,
    SpecFile,
)
from .snapshot import (
    ALL_FILES,
    FileChangeSummary,
    TextStats,
    build_corpus_text,
    build_distance_text,
    build_snapshot_markdown,
    compute_file_change_summary,
    compute_text_stats,
    index_spec_files,
)

__all__ = [
    "ALL_FILES",
    "ChangeGroup",
    "Corpus",
    "CorpusFormatError",
    "FileChangeSummary",
    "MAX_BUCKET",
    "MIN_BUCKET",
    "NumStat",
    "ReviewRecord",
    "Revision",
    "SpecFile",
    "TextStats",
    "UNLABELED_BUCKET",
    "UNREVIEWED_BUCKET",
    "build_corpus_text",
    "build_distance_text",
    "build_snapshot_markdown",
    "compute_file_change_summary",
    "compute_text_stats",
    "index_spec_files",
    "load_corpus",
]
