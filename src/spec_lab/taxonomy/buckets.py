"""Fixed bucket label taxonomy."""

from __future__ import annotations

from dataclasses import dataclass

from spec_lab.corpus.models import MAX_BUCKET, MIN_BUCKET


@dataclass(slots=True, frozen=True)
class BucketLabel:
    key: int
    name: str
    color: str


BUCKET_LABELS: tuple[BucketLabel, ...] = (
    BucketLabel(0, "Unreviewed", "#64748b"),
    BucketLabel(1, "Logic / Math Fixes", "#fb7185"),
    BucketLabel(2, "Codebase Accuracy", "#fbbf24"),
    BucketLabel(3, "External Ecosystem Accuracy", "#60a5fa"),
    BucketLabel(4, "Concept / Architecture", "#a78bfa"),
    BucketLabel(5, "Scrivening / Ministerial", "#94a3b8"),
    BucketLabel(6, "Background / Context", "#34d399"),
    BucketLabel(7, "Engineering Improvements", "#22c55e"),
    BucketLabel(8, "Alien Artifact", "#06b6d4"),
    BucketLabel(9, "Elaboration", "#cbd5e1"),
    BucketLabel(10, "Other", "#e2e8f0"),
)
BUCKET_KEYS: tuple[int, ...] = tuple(label.key for label in BUCKET_LABELS)


def is_valid_bucket(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_BUCKET <= value <= MAX_BUCKET


def bucket_label(key: int) -> BucketLabel:
    """Return the label for a bucket id; raises KeyError outside 0-10."""
    if not is_valid_bucket(key):
        raise KeyError(key)
    return BUCKET_LABELS[key]
