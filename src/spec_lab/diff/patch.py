"""Unified diff parsing and side-by-side hunk reconstruction."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import assert_never

FILE_MARKER = "diff --git "
HUNK_MARKER = "@@"
FILE_MARKER_PATTERN = re.compile(r"^diff --git a/(.+?) b/(.+)$")
HUNK_HEADER_PATTERN = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
UNKNOWN_PATH = "unknown"


class PatchLineKind(StrEnum):
    META = "meta"
    CONTEXT = "context"
    ADD = "add"
    DEL = "del"


class CellKind(StrEnum):
    CONTEXT = "context"
    ADD = "add"
    DEL = "del"
    EMPTY = "empty"


@dataclass(slots=True, frozen=True)
class PatchLine:
    kind: PatchLineKind
    text: str


@dataclass(slots=True)
class PatchHunk:
    header: str
    lines: list[PatchLine] = field(default_factory=list)


@dataclass(slots=True)
class PatchFile:
    """One file section of a unified diff."""

    old_path: str
    new_path: str
    header_lines: list[PatchLine] = field(default_factory=list)
    hunks: list[PatchHunk] = field(default_factory=list)

    @property
    def added(self) -> int:
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.kind is PatchLineKind.ADD)

    @property
    def deleted(self) -> int:
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.kind is PatchLineKind.DEL)


@dataclass(slots=True, frozen=True)
class HunkRange:
    old_start: int
    old_count: int
    new_start: int
    new_count: int


@dataclass(slots=True, frozen=True)
class SideCell:
    kind: CellKind
    line_no: int | None = None
    text: str | None = None


EMPTY_CELL = SideCell(kind=CellKind.EMPTY)


@dataclass(slots=True, frozen=True)
class SideRow:
    left: SideCell
    right: SideCell


def classify_patch_line(line: str) -> PatchLineKind:
    """Classify a non-marker line of a unified diff."""
    if line.startswith("+") and not line.startswith("+++"):
        return PatchLineKind.ADD
    if line.startswith("-") and not line.startswith("---"):
        return PatchLineKind.DEL
    if line.startswith(" "):
        return PatchLineKind.CONTEXT
    return PatchLineKind.META


def parse_git_patch(patch: str) -> list[PatchFile]:
    """Parse unified diff text into per-file hunks in source order.

    Lines before the first file marker are ignored. Anything unrecognized is
    kept as a meta line rather than rejected.
    """
    files: list[PatchFile] = []
    current_file: PatchFile | None = None
    current_hunk: PatchHunk | None = None

    lines = patch.split("\n")
    # a trailing newline terminates the last line, it does not start a new one
    if lines and lines[-1] == "":
        lines.pop()

    for line in lines:
        if line.startswith(FILE_MARKER):
            marker = FILE_MARKER_PATTERN.match(line)
            current_file = PatchFile(
                old_path=marker.group(1) if marker else UNKNOWN_PATH,
                new_path=marker.group(2) if marker else UNKNOWN_PATH,
                header_lines=[PatchLine(PatchLineKind.META, line)],
            )
            files.append(current_file)
            current_hunk = None
            continue

        if current_file is None:
            continue

        if line.startswith(HUNK_MARKER):
            current_hunk = PatchHunk(header=line)
            current_file.hunks.append(current_hunk)
            continue

        patch_line = PatchLine(classify_patch_line(line), line)
        if current_hunk is not None:
            current_hunk.lines.append(patch_line)
        else:
            current_file.header_lines.append(patch_line)

    return files


def parse_hunk_header(header: str) -> HunkRange | None:
    """Extract old/new start lines and counts; None when unrecognized."""
    match = HUNK_HEADER_PATTERN.search(header)
    if match is None:
        return None
    return HunkRange(
        old_start=int(match.group(1)),
        old_count=int(match.group(2)) if match.group(2) is not None else 1,
        new_start=int(match.group(3)),
        new_count=int(match.group(4)) if match.group(4) is not None else 1,
    )


def hunk_to_side_by_side_rows(hunk: PatchHunk) -> list[SideRow]:
    """Pair a hunk's deletions and additions by position for two-column display.

    Consecutive del and add lines are buffered until the next context or meta
    line (or the end of the hunk), then paired row by row with the shorter
    side padded by empty cells.
    """
    hunk_range = parse_hunk_header(hunk.header)
    old_line = hunk_range.old_start if hunk_range else 1
    new_line = hunk_range.new_start if hunk_range else 1

    rows: list[SideRow] = []
    dels: list[PatchLine] = []
    adds: list[PatchLine] = []

    def flush() -> None:
        nonlocal old_line, new_line
        for pos in range(max(len(dels), len(adds))):
            left = EMPTY_CELL
            right = EMPTY_CELL
            if pos < len(dels):
                left = SideCell(CellKind.DEL, old_line, dels[pos].text[1:])
                old_line += 1
            if pos < len(adds):
                right = SideCell(CellKind.ADD, new_line, adds[pos].text[1:])
                new_line += 1
            rows.append(SideRow(left=left, right=right))
        dels.clear()
        adds.clear()

    for line in hunk.lines:
        match line.kind:
            case PatchLineKind.DEL:
                dels.append(line)
            case PatchLineKind.ADD:
                adds.append(line)
            case PatchLineKind.CONTEXT:
                flush()
                text = line.text[1:]
                rows.append(
                    SideRow(
                        left=SideCell(CellKind.CONTEXT, old_line, text),
                        right=SideCell(CellKind.CONTEXT, new_line, text),
                    )
                )
                old_line += 1
                new_line += 1
            case PatchLineKind.META:
                flush()
                rows.append(SideRow(left=EMPTY_CELL, right=EMPTY_CELL))
            case _:
                assert_never(line.kind)
    flush()
    return rows


def count_patch_changes(files: Sequence[PatchFile]) -> tuple[int, int]:
    """Return total (added, deleted) line counts across parsed files."""
    return sum(item.added for item in files), sum(item.deleted for item in files)
