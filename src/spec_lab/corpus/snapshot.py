"""Snapshot helpers over a revision's file set."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from spec_lab.corpus.models import Revision, SpecFile

ALL_FILES = "__ALL__"
CORPUS_SEPARATOR = "\n\n---\n\n"
SNAPSHOT_TITLE = "# Spec Corpus (snapshot)\n"


@dataclass(slots=True, frozen=True)
class FileChangeSummary:
    """Sorted path classification between two snapshots."""

    added: tuple[str, ...]
    removed: tuple[str, ...]
    modified: tuple[str, ...]
    unchanged: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class TextStats:
    lines: int
    bytes: int


def index_spec_files(files: Sequence[SpecFile]) -> dict[str, str]:
    """Map path to content."""
    return {item.path: item.content for item in files}


def compute_file_change_summary(
    previous: Sequence[SpecFile], current: Sequence[SpecFile]
) -> FileChangeSummary:
    """Classify paths as added, removed, modified or unchanged."""
    before = index_spec_files(previous)
    after = index_spec_files(current)
    added = sorted(set(after) - set(before))
    removed = sorted(set(before) - set(after))
    modified: list[str] = []
    unchanged: list[str] = []
    for path in sorted(set(before) & set(after)):
        if before[path] == after[path]:
            unchanged.append(path)
        else:
            modified.append(path)
    return FileChangeSummary(
        added=tuple(added),
        removed=tuple(removed),
        modified=tuple(modified),
        unchanged=tuple(unchanged),
    )


def build_corpus_text(files: Sequence[SpecFile], file_choice: str = ALL_FILES) -> str:
    """Return one file's content, or every file sorted by path.

    An empty choice means all files. A missing file yields an empty string.
    """
    if file_choice and file_choice != ALL_FILES:
        for item in files:
            if item.path == file_choice:
                return item.content
        return ""
    ordered = sorted(files, key=lambda item: item.path)
    return CORPUS_SEPARATOR.join(f"## {item.path}\n\n{item.content}" for item in ordered)


def build_distance_text(files: Sequence[SpecFile]) -> str:
    """Flatten a file set in revision order for line edit distance."""
    return "\n".join(f"## {item.path}\n{item.content}" for item in files)


def build_snapshot_markdown(revision: Revision, file_choice: str = ALL_FILES) -> str:
    """Render a revision's snapshot as a single markdown document."""
    if file_choice and file_choice != ALL_FILES:
        for item in revision.files:
            if item.path == file_choice:
                return f"# {item.path}\n\n{item.content}"
        return ""
    parts = [SNAPSHOT_TITLE]
    for item in revision.files:
        parts.append(f"\n---\n\n## {item.path}\n\n{item.content}")
    return "\n".join(parts)


def compute_text_stats(text: str) -> TextStats:
    """Count newline-separated lines and UTF-8 bytes."""
    if not text:
        return TextStats(lines=0, bytes=0)
    return TextStats(lines=len(text.split("\n")), bytes=len(text.encode("utf-8")))
