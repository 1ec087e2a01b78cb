"""Line diff, bounded edit distance and unified diff parsing."""

from .distance import compute_edit_distance_hashes, compute_edit_distance_lines, fnv1a_32
from .myers import (
    DiffKind,
    DiffOp,
    DiffSummary,
    myers_diff_lines,
    myers_diff_text_lines,
    reconstruct_source,
    reconstruct_target,
    split_text_lines,
    summarize_ops,
)
from .patch import (
    CellKind,
    HunkRange,
    PatchFile,
    PatchHunk,
    PatchLine,
    PatchLineKind,
    SideCell,
    SideRow,
    classify_patch_line,
    count_patch_changes,
    hunk_to_side_by_side_rows,
    parse_git_patch,
    parse_hunk_header,
)

__all__ = [
    "CellKind",
    "DiffKind",
    "DiffOp",
    "DiffSummary",
    "HunkRange",
    "PatchFile",
    "PatchHunk",
    "PatchLine",
    "PatchLineKind",
    "SideCell",
    "SideRow",
    "classify_patch_line",
    "compute_edit_distance_hashes",
    "compute_edit_distance_lines",
    "count_patch_changes",
    "fnv1a_32",
    "hunk_to_side_by_side_rows",
    "myers_diff_lines",
    "myers_diff_text_lines",
    "parse_git_patch",
    "parse_hunk_header",
    "reconstruct_source",
    "reconstruct_target",
    "split_text_lines",
    "summarize_ops",
]
