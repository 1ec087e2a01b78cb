"""Incremental inverted index over revision snapshots."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from spec_lab.corpus.models import Revision
from spec_lab.search.tokens import tokenize

DEFAULT_MAX_HITS = 50
DEFAULT_SNIPPET_RADIUS = 60
ELLIPSIS = "…"


@dataclass(slots=True, frozen=True)
class SearchHit:
    """One matching line plus the revision metadata needed to display it."""

    revision_index: int
    short_id: str
    timestamp: str
    subject: str
    file_path: str
    line_no: int
    snippet: str


@dataclass(slots=True, frozen=True)
class IndexProgress:
    indexed: int
    total: int
    done: bool


class CorpusIndex:
    """Term -> revision postings, built in caller-driven batches.

    Revisions are indexed strictly in order and a revision's postings are
    merged only after all of its files are tokenized, so queries only ever
    see fully indexed revisions.
    """

    def __init__(self, snippet_radius: int = DEFAULT_SNIPPET_RADIUS) -> None:
        self._snippet_radius = snippet_radius
        self._revisions: tuple[Revision, ...] = ()
        self._postings: dict[str, set[int]] = {}
        self._indexed = 0

    @property
    def indexed(self) -> int:
        return self._indexed

    @property
    def total(self) -> int:
        return len(self._revisions)

    @property
    def done(self) -> bool:
        return self._indexed >= len(self._revisions)

    @property
    def progress(self) -> IndexProgress:
        return IndexProgress(indexed=self.indexed, total=self.total, done=self.done)

    @property
    def term_count(self) -> int:
        return len(self._postings)

    def init(self, revisions: Sequence[Revision]) -> None:
        """Reset to a not-yet-indexed state over the given revisions."""
        self._revisions = tuple(revisions)
        self._postings = {}
        self._indexed = 0

    def clear(self) -> None:
        """Drop all index state, including the revision list."""
        self.init(())

    def index_batch(self, batch_size: int) -> bool:
        """Index up to batch_size more revisions; return True while more remain."""
        end = min(len(self._revisions), self._indexed + max(0, batch_size))
        for position in range(self._indexed, end):
            terms = _revision_terms(self._revisions[position])
            for term in terms:
                self._postings.setdefault(term, set()).add(position)
            self._indexed = position + 1
        return not self.done

    def search(self, query: str, max_hits: int = DEFAULT_MAX_HITS) -> list[SearchHit]:
        """Return line hits from revisions containing every query term, newest first."""
        terms = tokenize(query)
        if not terms or max_hits < 1:
            return []

        candidates: set[int] | None = None
        for term in terms:
            postings = self._postings.get(term)
            if not postings:
                return []
            candidates = set(postings) if candidates is None else candidates & postings
            if not candidates:
                return []
        assert candidates is not None

        term_set = set(terms)
        hits: list[SearchHit] = []
        for position in sorted(candidates, reverse=True):
            revision = self._revisions[position]
            for item in revision.files:
                for line_no, line in enumerate(item.content.split("\n"), start=1):
                    matched = term_set.intersection(tokenize(line))
                    if not matched:
                        continue
                    start, length = _first_occurrence(line, matched)
                    hits.append(
                        _make_hit(
                            revision,
                            item.path,
                            line_no,
                            build_snippet(line, start, length, self._snippet_radius),
                        )
                    )
                    if len(hits) >= max_hits:
                        return hits
        return hits


def search_single_revision(
    revision: Revision,
    query: str,
    max_hits: int = DEFAULT_MAX_HITS,
    snippet_radius: int = DEFAULT_SNIPPET_RADIUS,
) -> list[SearchHit]:
    """Case-insensitive substring search within one revision, one hit per occurrence."""
    needle = query.strip()
    if not needle or max_hits < 1:
        return []
    # offsets must index the original line; lowercasing can change its length
    pattern = re.compile(re.escape(needle), re.IGNORECASE)
    hits: list[SearchHit] = []
    for item in revision.files:
        for line_no, line in enumerate(item.content.split("\n"), start=1):
            for found in pattern.finditer(line):
                hits.append(
                    _make_hit(
                        revision,
                        item.path,
                        line_no,
                        build_snippet(line, found.start(), len(found.group(0)), snippet_radius),
                    )
                )
                if len(hits) >= max_hits:
                    return hits
    return hits


def build_snippet(line: str, start: int, length: int, radius: int) -> str:
    """Window of radius chars around a match, ellipsized on each cut side."""
    begin = max(0, start - radius)
    end = min(len(line), start + length + radius)
    snippet = line[begin:end]
    if begin > 0:
        snippet = ELLIPSIS + snippet
    if end < len(line):
        snippet = snippet + ELLIPSIS
    return snippet


def _first_occurrence(line: str, terms: set[str]) -> tuple[int, int]:
    """Start and length of the earliest term occurrence in the original line."""
    best: tuple[int, int] | None = None
    for term in sorted(terms):
        found = re.search(re.escape(term), line, re.IGNORECASE)
        if found is not None and (best is None or found.start() < best[0]):
            best = (found.start(), len(found.group(0)))
    return best if best is not None else (0, 0)


def _revision_terms(revision: Revision) -> set[str]:
    terms: set[str] = set()
    for item in revision.files:
        terms.update(tokenize(item.content))
    return terms


def _make_hit(revision: Revision, path: str, line_no: int, snippet: str) -> SearchHit:
    return SearchHit(
        revision_index=revision.index,
        short_id=revision.short_id,
        timestamp=revision.timestamp,
        subject=revision.subject,
        file_path=path,
        line_no=line_no,
        snippet=snippet,
    )
