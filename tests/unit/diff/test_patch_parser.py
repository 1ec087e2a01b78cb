from __future__ import annotations

from spec_lab.diff import PatchLineKind, count_patch_changes, parse_git_patch, parse_hunk_header

TWO_FILE_PATCH = "\n".join(
    [
        "diff --git a/spec/one.md b/spec/one.md",
        "index 1111111..2222222 100644",
        "--- a/spec/one.md",
        "+++ b/spec/one.md",
        "@@ -1,2 +1,2 @@",
        " keep",
        "-old",
        "+new",
        "diff --git a/spec/two.md b/spec/two.md",
        "new file mode 100644",
        "--- /dev/null",
        "+++ b/spec/two.md",
        "@@ -0,0 +1 @@",
        "+hello",
        "",
    ]
)


def test_two_file_patch_yields_two_files_in_source_order() -> None:
    files = parse_git_patch(TWO_FILE_PATCH)
    assert [(item.old_path, item.new_path) for item in files] == [
        ("spec/one.md", "spec/one.md"),
        ("spec/two.md", "spec/two.md"),
    ]
    assert [len(item.hunks) for item in files] == [1, 1]


def test_header_lines_are_meta_and_hunk_lines_are_classified() -> None:
    first = parse_git_patch(TWO_FILE_PATCH)[0]
    assert [line.kind for line in first.header_lines] == [PatchLineKind.META] * 4
    assert first.header_lines[2].text == "--- a/spec/one.md"
    hunk = first.hunks[0]
    assert hunk.header == "@@ -1,2 +1,2 @@"
    assert [line.kind for line in hunk.lines] == [
        PatchLineKind.CONTEXT,
        PatchLineKind.DEL,
        PatchLineKind.ADD,
    ]


def test_change_counts_per_file_and_total() -> None:
    files = parse_git_patch(TWO_FILE_PATCH)
    assert (files[0].added, files[0].deleted) == (1, 1)
    assert (files[1].added, files[1].deleted) == (1, 0)
    assert count_patch_changes(files) == (2, 1)


def test_lines_before_first_file_marker_are_ignored() -> None:
    files = parse_git_patch("From abc\nSubject: x\n\ndiff --git a/a.md b/a.md\n@@ -1 +1 @@\n-a\n+b")
    assert len(files) == 1
    assert files[0].old_path == "a.md"


def test_malformed_input_degrades_instead_of_raising() -> None:
    files = parse_git_patch("diff --git nonsense\n@@ garbage @@\n\\ No newline at end of file\n+x")
    assert files[0].old_path == "unknown"
    assert files[0].new_path == "unknown"
    hunk = files[0].hunks[0]
    assert [line.kind for line in hunk.lines] == [PatchLineKind.META, PatchLineKind.ADD]
    assert parse_git_patch("") == []


def test_parse_hunk_header_defaults_counts_to_one() -> None:
    parsed = parse_hunk_header("@@ -12 +14,3 @@ section title")
    assert parsed is not None
    assert (parsed.old_start, parsed.old_count, parsed.new_start, parsed.new_count) == (12, 1, 14, 3)
    assert parse_hunk_header("@@ not a header @@") is None
