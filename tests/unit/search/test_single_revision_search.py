from __future__ import annotations

from spec_lab.corpus import Revision, SpecFile
from spec_lab.search import search_single_revision


def _revision(*contents: tuple[str, str]) -> Revision:
    return Revision(
        index=4,
        short_id="abc1234",
        timestamp="2026-03-01T09:30:00Z",
        subject="tighten wording",
        files=tuple(SpecFile(path=path, content=text) for path, text in contents),
        raw_patch="",
    )


def test_every_occurrence_is_a_separate_hit() -> None:
    hits = search_single_revision(_revision(("spec.md", "Foo foo\nbar FOO")), "  foo ")
    assert [(hit.line_no, hit.snippet) for hit in hits] == [
        (1, "Foo foo"),
        (1, "Foo foo"),
        (2, "bar FOO"),
    ]
    assert all(hit.revision_index == 4 for hit in hits)


def test_substring_matches_inside_words() -> None:
    hits = search_single_revision(_revision(("a.md", "AAAAtargetBBBB")), "target")
    assert len(hits) == 1
    assert hits[0].file_path == "a.md"


def test_blank_query_and_hit_cap() -> None:
    revision = _revision(("a.md", "x x x x"))
    assert search_single_revision(revision, "   ") == []
    assert len(search_single_revision(revision, "x", max_hits=3)) == 3


def test_long_line_snippet_uses_radius() -> None:
    line = "A" * 80 + "TARGET" + "B" * 80
    hits = search_single_revision(_revision(("a.md", line)), "target", snippet_radius=60)
    assert hits[0].snippet == "…" + "A" * 60 + "TARGET" + "B" * 60 + "…"


def test_snippet_offsets_survive_characters_that_grow_when_lowercased() -> None:
    line = "İ" * 100 + " target " + "x" * 100
    hits = search_single_revision(_revision(("a.md", line)), "TARGET", snippet_radius=10)
    assert len(hits) == 1
    assert hits[0].snippet == "…" + "İ" * 9 + " target " + "x" * 9 + "…"
