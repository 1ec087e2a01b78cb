"""Distribute review labels across time buckets for stacked charts.

Magnitude routing:

* an unreviewed revision puts its whole magnitude on bucket 0;
* a reviewed revision splits its magnitude evenly across change groups;
* a reviewed revision with no change groups contributes nothing, though
  the bucket mask still lists it under 10;
* a group without labels puts its share on bucket 10;
* with soft assignment a group's share is split evenly across its labels,
  otherwise (multi-label) every label receives the full share, so bucket
  totals may exceed the raw corpus magnitude in that mode.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import assert_never

from spec_lab.corpus.models import UNLABELED_BUCKET, UNREVIEWED_BUCKET, Revision
from spec_lab.diff.patch import count_patch_changes, parse_git_patch
from spec_lab.taxonomy.buckets import BUCKET_KEYS, is_valid_bucket


class Metric(StrEnum):
    GROUPS = "groups"
    LINES = "lines"
    PATCH_BYTES = "patchBytes"


class TimeGranularity(StrEnum):
    DAY = "day"
    HOUR = "hour"
    QUARTER_HOUR = "15m"
    FIVE_MINUTES = "5m"


@dataclass(slots=True, frozen=True)
class RevisionTotals:
    added: int
    deleted: int
    files: int


@dataclass(slots=True, frozen=True)
class TaxonomyChart:
    """Per-bucket series aligned to ordered time-bucket keys."""

    x_keys: tuple[str, ...]
    series_by_bucket: dict[int, tuple[float, ...]]
    first_revision_by_key: dict[str, int]

    def totals(self) -> tuple[float, ...]:
        """Stacked height of each time bucket."""
        return tuple(
            sum(self.series_by_bucket[bucket][pos] for bucket in BUCKET_KEYS)
            for pos in range(len(self.x_keys))
        )


def revision_totals(revision: Revision) -> RevisionTotals:
    """Added/deleted line totals from numstat, else counted from the raw patch."""
    if revision.numstat is not None:
        return RevisionTotals(
            added=sum(item.added for item in revision.numstat),
            deleted=sum(item.deleted for item in revision.numstat),
            files=len(revision.numstat),
        )
    files = parse_git_patch(revision.raw_patch)
    added, deleted = count_patch_changes(files)
    return RevisionTotals(added=added, deleted=deleted, files=len(files))


def revision_magnitude(revision: Revision, metric: Metric) -> float:
    match metric:
        case Metric.GROUPS:
            return float(revision.group_count or 1)
        case Metric.LINES:
            totals = revision_totals(revision)
            return float(totals.added + totals.deleted)
        case Metric.PATCH_BYTES:
            return float(len(revision.raw_patch.encode("utf-8")))
        case _:
            assert_never(metric)


def revision_bucket_mask(revision: Revision) -> frozenset[int]:
    """Every bucket a revision touches."""
    if revision.review is None:
        return frozenset({UNREVIEWED_BUCKET})
    mask: set[int] = set()
    for group in revision.review.groups:
        labels = {bucket for bucket in group.buckets if is_valid_bucket(bucket)}
        if labels:
            mask.update(labels)
        else:
            mask.add(UNLABELED_BUCKET)
    if not mask:
        mask.add(UNLABELED_BUCKET)
    return frozenset(mask)


def distribute_revision(
    revision: Revision,
    metric: Metric = Metric.GROUPS,
    soft_assignment: bool = True,
) -> dict[int, float]:
    """Return bucket -> contribution for one revision."""
    magnitude = revision_magnitude(revision, metric)
    if revision.review is None:
        return {UNREVIEWED_BUCKET: magnitude}
    groups = revision.review.groups
    if not groups:
        return {}

    per_group = magnitude / len(groups)
    out: dict[int, float] = {}
    for group in groups:
        labels = sorted(bucket for bucket in group.buckets if is_valid_bucket(bucket))
        if not labels:
            out[UNLABELED_BUCKET] = out.get(UNLABELED_BUCKET, 0.0) + per_group
            continue
        share = per_group / len(labels) if soft_assignment else per_group
        for bucket in labels:
            out[bucket] = out.get(bucket, 0.0) + share
    return out


def time_bucket_key(timestamp: str, granularity: TimeGranularity) -> str:
    """Truncate the timestamp's own wall-clock text to a bucket boundary."""
    day = timestamp[:10]
    hour = timestamp[11:13] if timestamp[11:13].isdigit() else "00"
    minute_text = timestamp[14:16]
    minute = int(minute_text) if minute_text.isdigit() else 0

    match granularity:
        case TimeGranularity.DAY:
            return day
        case TimeGranularity.HOUR:
            return f"{day} {hour}:00"
        case TimeGranularity.QUARTER_HOUR:
            return f"{day} {hour}:{(minute // 15) * 15:02d}"
        case TimeGranularity.FIVE_MINUTES:
            return f"{day} {hour}:{(minute // 5) * 5:02d}"
        case _:
            assert_never(granularity)


def filter_revisions(
    revisions: Sequence[Revision],
    query: str = "",
    reviewed_only: bool = False,
    bucket_filter: int | None = None,
) -> list[Revision]:
    """Revision list filter by review state, bucket and subject/short-id text."""
    needle = query.strip().lower()
    output: list[Revision] = []
    for revision in revisions:
        if reviewed_only and not revision.reviewed:
            continue
        if bucket_filter is not None and bucket_filter not in revision_bucket_mask(revision):
            continue
        if needle and needle not in revision.subject.lower() and needle not in revision.short_id.lower():
            continue
        output.append(revision)
    return output


def aggregate_taxonomy(
    revisions: Sequence[Revision],
    metric: Metric = Metric.GROUPS,
    granularity: TimeGranularity = TimeGranularity.DAY,
    soft_assignment: bool = True,
    bucket_filter: int | None = None,
    reviewed_only: bool = False,
) -> TaxonomyChart:
    """Build one magnitude series per bucket over sorted time-bucket keys."""
    by_key: dict[str, list[Revision]] = {}
    for revision in filter_revisions(revisions, reviewed_only=reviewed_only, bucket_filter=bucket_filter):
        by_key.setdefault(time_bucket_key(revision.timestamp, granularity), []).append(revision)

    x_keys = tuple(sorted(by_key))
    series: dict[int, list[float]] = {bucket: [0.0] * len(x_keys) for bucket in BUCKET_KEYS}
    first_revision_by_key: dict[str, int] = {}
    for pos, key in enumerate(x_keys):
        members = by_key[key]
        first_revision_by_key[key] = members[0].index
        for revision in members:
            for bucket, value in distribute_revision(revision, metric, soft_assignment).items():
                if not is_valid_bucket(bucket):
                    continue
                series[bucket][pos] += value

    return TaxonomyChart(
        x_keys=x_keys,
        series_by_bucket={bucket: tuple(values) for bucket, values in series.items()},
        first_revision_by_key=first_revision_by_key,
    )
