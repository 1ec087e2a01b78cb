"""Typed models for the revision corpus."""

from __future__ import annotations

from dataclasses import dataclass, field

MIN_BUCKET = 0
MAX_BUCKET = 10
UNREVIEWED_BUCKET = 0
UNLABELED_BUCKET = 10


@dataclass(slots=True, frozen=True)
class SpecFile:
    """One document's full content at a given revision."""

    path: str
    content: str


@dataclass(slots=True, frozen=True)
class NumStat:
    """Per-file added/deleted line counts."""

    path: str
    added: int
    deleted: int


@dataclass(slots=True, frozen=True)
class ChangeGroup:
    """One manually identified logical edit within a revision."""

    buckets: frozenset[int] = frozenset()
    title: str | None = None
    confidence: float | None = None
    rationale: str | None = None
    evidence: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ReviewRecord:
    """Manual review annotations for a revision."""

    groups: tuple[ChangeGroup, ...] = ()
    notes: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class Revision:
    """One historical snapshot plus its patch against the parent."""

    index: int
    short_id: str
    timestamp: str
    subject: str
    files: tuple[SpecFile, ...]
    raw_patch: str
    review: ReviewRecord | None = None
    numstat: tuple[NumStat, ...] | None = None

    @property
    def reviewed(self) -> bool:
        return self.review is not None

    @property
    def group_count(self) -> int:
        if self.review is None:
            return 0
        return len(self.review.groups)


@dataclass(slots=True, frozen=True)
class Corpus:
    """Ordered, immutable revision sequence plus label metadata."""

    revisions: tuple[Revision, ...]
    bucket_defs: dict[str, str] = field(default_factory=dict)
    scope_paths: tuple[str, ...] = ()
    generated_at: str | None = None

    def __len__(self) -> int:
        return len(self.revisions)

    def bucket_description(self, bucket: int) -> str:
        """Return the dataset's description for a bucket label, if any."""
        return self.bucket_defs.get(str(bucket), "")
