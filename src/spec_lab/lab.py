"""Lab session wiring corpus, search index, aggregation and audit logging."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from spec_lab.config import LabConfig, LabOverrides, load_effective_config
from spec_lab.corpus import (
    ALL_FILES,
    Corpus,
    CorpusFormatError,
    FileChangeSummary,
    Revision,
    build_corpus_text,
    build_distance_text,
    build_snapshot_markdown,
    compute_file_change_summary,
    load_corpus,
)
from spec_lab.diff import (
    DiffOp,
    DiffSummary,
    PatchFile,
    SideRow,
    compute_edit_distance_lines,
    hunk_to_side_by_side_rows,
    myers_diff_text_lines,
    parse_git_patch,
    summarize_ops,
)
from spec_lab.logging import LabAuditLog
from spec_lab.search import CorpusIndex, IndexProgress, SearchHit, search_single_revision
from spec_lab.taxonomy import (
    Metric,
    TaxonomyChart,
    TimeGranularity,
    aggregate_taxonomy,
    filter_revisions,
    revision_totals,
)

AUDIT_LOG_NAME = "audit.jsonl"


@dataclass(slots=True, frozen=True)
class DistanceReport:
    """Previous-to-current line edit distance with the ceiling that was applied."""

    revision_index: int
    distance: int | None
    ceiling: int
    exceeded: bool
    elapsed_ms: float


@dataclass(slots=True, frozen=True)
class SnapshotComparison:
    revision_index: int
    file_choice: str
    ops: tuple[DiffOp, ...]
    summary: DiffSummary
    files: FileChangeSummary


class SpecEvolutionLab:
    """Read-only views over one corpus plus the incremental search index."""

    def __init__(
        self,
        corpus: Corpus,
        config: LabConfig,
        audit_log: LabAuditLog | None = None,
    ) -> None:
        self._corpus = corpus
        self._config = config
        self._audit_log = audit_log or LabAuditLog(config.data_dir / AUDIT_LOG_NAME)
        self._index = CorpusIndex(snippet_radius=config.search.snippet_radius)
        self._index.init(corpus.revisions)

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def config(self) -> LabConfig:
        return self._config

    @property
    def audit_log(self) -> LabAuditLog:
        return self._audit_log

    @property
    def index_progress(self) -> IndexProgress:
        return self._index.progress

    def clamp_index(self, index: int) -> int:
        """Clamp a requested selection into the corpus range."""
        return max(0, min(len(self._corpus.revisions) - 1, index))

    def revision(self, index: int) -> Revision | None:
        if not self._corpus.revisions:
            return None
        return self._corpus.revisions[self.clamp_index(index)]

    def previous_revision(self, index: int) -> Revision | None:
        current = self.revision(index)
        if current is None or current.index == 0:
            return None
        return self._corpus.revisions[current.index - 1]

    def patch_files(self, index: int) -> list[PatchFile]:
        """Parse the stored patch of the selected revision."""
        revision = self.revision(index)
        files = parse_git_patch(revision.raw_patch) if revision is not None else []
        self._audit_log.record(
            "patch_files",
            revision_index=revision.index if revision is not None else None,
            file_count=len(files),
        )
        return files

    def side_by_side(self, index: int) -> list[list[list[SideRow]]]:
        """Side-by-side rows per file, per hunk, of the selected revision's patch."""
        revision = self.revision(index)
        if revision is None:
            return []
        rows = [
            [hunk_to_side_by_side_rows(hunk) for hunk in item.hunks]
            for item in parse_git_patch(revision.raw_patch)
        ]
        self._audit_log.record(
            "side_by_side",
            revision_index=revision.index,
            hunk_count=sum(len(hunks) for hunks in rows),
        )
        return rows

    def snapshot_markdown(self, index: int, file_choice: str = ALL_FILES) -> str:
        revision = self.revision(index)
        if revision is None:
            return ""
        markdown = build_snapshot_markdown(revision, file_choice)
        self._audit_log.record(
            "snapshot_markdown",
            revision_index=revision.index,
            file_choice=file_choice,
            length=len(markdown),
        )
        return markdown

    def compare_snapshots(self, index: int, file_choice: str = ALL_FILES) -> SnapshotComparison | None:
        """Ad hoc line diff of the selected revision's snapshot against its parent."""
        current = self.revision(index)
        if current is None:
            return None
        previous = self.previous_revision(index)
        previous_files = previous.files if previous is not None else ()
        ops = myers_diff_text_lines(
            build_corpus_text(previous_files, file_choice),
            build_corpus_text(current.files, file_choice),
        )
        summary = summarize_ops(ops)
        self._audit_log.record(
            "compare_snapshots",
            revision_index=current.index,
            file_choice=file_choice,
            added=summary.added,
            deleted=summary.deleted,
        )
        return SnapshotComparison(
            revision_index=current.index,
            file_choice=file_choice,
            ops=tuple(ops),
            summary=summary,
            files=compute_file_change_summary(previous_files, current.files),
        )

    def edit_distance(self, index: int) -> DistanceReport | None:
        """Bounded line edit distance between the selected revision and its parent."""
        current = self.revision(index)
        if current is None:
            return None
        totals = revision_totals(current)
        ceiling = self._config.distance.ceiling_for(totals.added, totals.deleted)
        previous = self.previous_revision(index)
        if previous is None:
            self._audit_log.record(
                "edit_distance", revision_index=current.index, ceiling=ceiling, has_previous=False
            )
            return DistanceReport(
                revision_index=current.index,
                distance=None,
                ceiling=ceiling,
                exceeded=False,
                elapsed_ms=0.0,
            )

        started = time.perf_counter()
        distance = compute_edit_distance_lines(
            build_distance_text(previous.files),
            build_distance_text(current.files),
            ceiling,
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        exceeded = distance > ceiling
        self._audit_log.record(
            "edit_distance",
            revision_index=current.index,
            ceiling=ceiling,
            exceeded=exceeded,
            has_previous=True,
        )
        return DistanceReport(
            revision_index=current.index,
            distance=distance,
            ceiling=ceiling,
            exceeded=exceeded,
            elapsed_ms=elapsed_ms,
        )

    def index_step(self, batch_size: int | None = None) -> IndexProgress:
        """Run one cooperative indexing batch."""
        size = batch_size if batch_size is not None else self._config.search.batch_size
        self._index.index_batch(size)
        progress = self._index.progress
        self._audit_log.record(
            "index_batch", indexed=progress.indexed, batch_size=size, total=progress.total
        )
        return progress

    def index_all(self) -> IndexProgress:
        while not self._index.done:
            self.index_step()
        return self._index.progress

    def reset_index(self) -> None:
        """Discard postings and start over from revision 0."""
        self._index.init(self._corpus.revisions)
        self._audit_log.record("reset_index", indexed=0, total=self._index.total)

    def search(self, query: str, max_hits: int | None = None) -> list[SearchHit]:
        """Corpus-wide AND search over whatever has been indexed so far."""
        limit = self._bounded_hits(max_hits)
        hits = self._index.search(query, limit)
        self._audit_log.record(
            "search",
            hit_count=len(hits),
            indexed=self._index.indexed,
            query=query,
            max_hits=limit,
        )
        return hits

    def search_revision(self, index: int, query: str, max_hits: int | None = None) -> list[SearchHit]:
        revision = self.revision(index)
        if revision is None:
            return []
        limit = self._bounded_hits(max_hits)
        hits = search_single_revision(
            revision, query, max_hits=limit, snippet_radius=self._config.search.snippet_radius
        )
        self._audit_log.record(
            "search_revision", revision_index=revision.index, hit_count=len(hits), query=query
        )
        return hits

    def list_revisions(
        self,
        query: str = "",
        reviewed_only: bool = False,
        bucket_filter: int | None = None,
    ) -> list[Revision]:
        revisions = filter_revisions(
            self._corpus.revisions,
            query=query,
            reviewed_only=reviewed_only,
            bucket_filter=bucket_filter,
        )
        self._audit_log.record(
            "list_revisions",
            hit_count=len(revisions),
            query=query,
            reviewed_only=reviewed_only,
            bucket_filter=bucket_filter,
        )
        return revisions

    def chart(
        self,
        metric: Metric | None = None,
        granularity: TimeGranularity | None = None,
        soft_assignment: bool | None = None,
        bucket_filter: int | None = None,
        reviewed_only: bool = False,
    ) -> TaxonomyChart:
        """Taxonomy chart using configured defaults for unspecified settings."""
        defaults = self._config.taxonomy
        chosen_metric = metric or defaults.metric
        chosen_granularity = granularity or defaults.granularity
        soft = defaults.soft_assignment if soft_assignment is None else soft_assignment
        chart = aggregate_taxonomy(
            self._corpus.revisions,
            metric=chosen_metric,
            granularity=chosen_granularity,
            soft_assignment=soft,
            bucket_filter=bucket_filter,
            reviewed_only=reviewed_only,
        )
        self._audit_log.record(
            "chart",
            metric=chosen_metric.value,
            granularity=chosen_granularity.value,
            soft_assignment=soft,
            bucket_filter=bucket_filter,
            reviewed_only=reviewed_only,
            key_count=len(chart.x_keys),
        )
        return chart

    def _bounded_hits(self, max_hits: int | None) -> int:
        cap = self._config.search.max_hits
        if max_hits is None:
            return cap
        return min(max_hits, cap)


def create_lab(
    payload: object,
    root: str | Path = ".",
    overrides: LabOverrides | None = None,
) -> SpecEvolutionLab:
    """Create a configured lab over an already-deserialized dataset."""
    config = load_effective_config(Path(root).resolve(), overrides=overrides)
    audit_log = LabAuditLog(config.data_dir / AUDIT_LOG_NAME)
    try:
        corpus = load_corpus(payload)
    except CorpusFormatError as exc:
        audit_log.record("load_corpus", ok=False, error_code="CORPUS_FORMAT", path=exc.path)
        raise
    audit_log.record("load_corpus", revision_count=len(corpus))
    return SpecEvolutionLab(corpus=corpus, config=config, audit_log=audit_log)
