"""Bucket label taxonomy and time-series aggregation."""

from .aggregate import (
    Metric,
    RevisionTotals,
    TaxonomyChart,
    TimeGranularity,
    aggregate_taxonomy,
    distribute_revision,
    filter_revisions,
    revision_bucket_mask,
    revision_magnitude,
    revision_totals,
    time_bucket_key,
)
from .buckets import BUCKET_KEYS, BUCKET_LABELS, BucketLabel, bucket_label, is_valid_bucket

__all__ = [
    "BUCKET_KEYS",
    "BUCKET_LABELS",
    "BucketLabel",
    "Metric",
    "RevisionTotals",
    "TaxonomyChart",
    "TimeGranularity",
    "aggregate_taxonomy",
    "bucket_label",
    "distribute_revision",
    "filter_revisions",
    "is_valid_bucket",
    "revision_bucket_mask",
    "revision_magnitude",
    "revision_totals",
    "time_bucket_key",
]
