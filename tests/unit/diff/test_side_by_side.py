from __future__ import annotations

from spec_lab.diff import CellKind, PatchHunk, PatchLine, PatchLineKind, SideCell, hunk_to_side_by_side_rows


def _hunk(header: str, lines: list[str]) -> PatchHunk:
    kinds = {"+": PatchLineKind.ADD, "-": PatchLineKind.DEL, " ": PatchLineKind.CONTEXT}
    return PatchHunk(
        header=header,
        lines=[PatchLine(kinds.get(line[:1], PatchLineKind.META), line) for line in lines],
    )


def test_two_deletions_pair_with_one_addition_and_one_empty_cell() -> None:
    rows = hunk_to_side_by_side_rows(_hunk("@@ -1,4 +1,3 @@", [" a", "-b", "-c", "+B", " d"]))

    assert rows[0].left == SideCell(CellKind.CONTEXT, 1, "a")
    assert rows[0].right == SideCell(CellKind.CONTEXT, 1, "a")
    assert rows[1].left == SideCell(CellKind.DEL, 2, "b")
    assert rows[1].right == SideCell(CellKind.ADD, 2, "B")
    assert rows[2].left == SideCell(CellKind.DEL, 3, "c")
    assert rows[2].right.kind is CellKind.EMPTY
    assert rows[3].left == SideCell(CellKind.CONTEXT, 4, "d")
    assert rows[3].right == SideCell(CellKind.CONTEXT, 3, "d")
    assert len(rows) == 4


def test_additions_longer_than_deletions_pad_the_left_side() -> None:
    rows = hunk_to_side_by_side_rows(_hunk("@@ -10,1 +20,3 @@", ["-x", "+y", "+z"]))
    assert [(row.left.kind, row.right.kind) for row in rows] == [
        (CellKind.DEL, CellKind.ADD),
        (CellKind.EMPTY, CellKind.ADD),
    ]
    assert [row.right.line_no for row in rows] == [20, 21]
    assert rows[0].left.line_no == 10


def test_unparseable_header_numbers_from_line_one() -> None:
    rows = hunk_to_side_by_side_rows(_hunk("@@ ??? @@", [" ctx", "+new"]))
    assert rows[0].left.line_no == 1
    assert rows[0].right.line_no == 1
    assert rows[1].right == SideCell(CellKind.ADD, 2, "new")


def test_meta_line_flushes_and_emits_empty_row() -> None:
    rows = hunk_to_side_by_side_rows(_hunk("@@ -1 +1 @@", ["-a", "\\ No newline at end of file", "+b"]))
    assert [(row.left.kind, row.right.kind) for row in rows] == [
        (CellKind.DEL, CellKind.EMPTY),
        (CellKind.EMPTY, CellKind.EMPTY),
        (CellKind.EMPTY, CellKind.ADD),
    ]
