"""Build a validated corpus from an already-deserialized dataset mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass

from spec_lab.corpus.models import (
    MAX_BUCKET,
    MIN_BUCKET,
    ChangeGroup,
    Corpus,
    NumStat,
    ReviewRecord,
    Revision,
    SpecFile,
)


@dataclass(slots=True, frozen=True)
class CorpusFormatError(Exception):
    """Raised when the payload is not a well-formed ordered revision sequence."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


def load_corpus(payload: object) -> Corpus:
    """Validate a dataset mapping and return an immutable corpus.

    Structural problems (missing commits, malformed file records) raise
    CorpusFormatError. Review annotations are free-form and are normalized
    instead: out-of-range bucket ids are dropped and confidence is clamped.
    """
    if not isinstance(payload, dict):
        raise CorpusFormatError(path="$", reason="dataset must be a mapping")
    commits = payload.get("commits")
    if not isinstance(commits, list):
        raise CorpusFormatError(path="$.commits", reason="must be a list")

    revisions = tuple(_parse_revision(raw, idx) for idx, raw in enumerate(commits))
    return Corpus(
        revisions=revisions,
        bucket_defs=_parse_bucket_defs(payload.get("bucket_defs")),
        scope_paths=tuple(item for item in _as_list(payload.get("scope_paths")) if isinstance(item, str)),
        generated_at=_optional_str(payload.get("generated_at")),
    )


def _parse_revision(raw: object, idx: int) -> Revision:
    where = f"$.commits[{idx}]"
    if not isinstance(raw, dict):
        raise CorpusFormatError(path=where, reason="commit must be a mapping")

    short_id = _required_str(raw, "short", where)
    timestamp = _required_str(raw, "date", where)
    subject = raw.get("subject", "")
    if subject is None:
        subject = ""
    if not isinstance(subject, str):
        raise CorpusFormatError(path=f"{where}.subject", reason="must be a string")
    raw_patch = raw.get("patch", "")
    if raw_patch is None:
        raw_patch = ""
    if not isinstance(raw_patch, str):
        raise CorpusFormatError(path=f"{where}.patch", reason="must be a string")

    return Revision(
        index=idx,
        short_id=short_id,
        timestamp=timestamp,
        subject=subject,
        files=_parse_files(raw.get("files", []), where),
        raw_patch=raw_patch,
        review=_parse_review(raw.get("review")),
        numstat=_parse_numstat(raw.get("numstat")),
    )


def _parse_files(raw: object, where: str) -> tuple[SpecFile, ...]:
    if not isinstance(raw, list):
        raise CorpusFormatError(path=f"{where}.files", reason="must be a list")
    files: list[SpecFile] = []
    seen: set[str] = set()
    for pos, item in enumerate(raw):
        item_where = f"{where}.files[{pos}]"
        if not isinstance(item, dict):
            raise CorpusFormatError(path=item_where, reason="file must be a mapping")
        path = item.get("path")
        content = item.get("content")
        if not isinstance(path, str):
            raise CorpusFormatError(path=f"{item_where}.path", reason="must be a string")
        if not isinstance(content, str):
            raise CorpusFormatError(path=f"{item_where}.content", reason="must be a string")
        if path in seen:
            raise CorpusFormatError(path=f"{item_where}.path", reason=f"duplicate path {path!r}")
        seen.add(path)
        files.append(SpecFile(path=path, content=content))
    return tuple(files)


def _parse_review(raw: object) -> ReviewRecord | None:
    if not isinstance(raw, dict):
        return None
    groups = tuple(_parse_group(item) for item in _as_list(raw.get("groups")) if isinstance(item, dict))
    notes = tuple(item for item in _as_list(raw.get("notes")) if isinstance(item, str))
    return ReviewRecord(groups=groups, notes=notes)


def _parse_group(raw: dict[str, object]) -> ChangeGroup:
    buckets: set[int] = set()
    for value in _as_list(raw.get("buckets")):
        # bool is an int subclass; True is not label 1
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        if MIN_BUCKET <= value <= MAX_BUCKET:
            buckets.add(value)
    return ChangeGroup(
        buckets=frozenset(buckets),
        title=_optional_str(raw.get("title")),
        confidence=_clamped_confidence(raw.get("confidence")),
        rationale=_optional_str(raw.get("rationale")),
        evidence=tuple(item for item in _as_list(raw.get("evidence")) if isinstance(item, str)),
    )


def _parse_numstat(raw: object) -> tuple[NumStat, ...] | None:
    if not isinstance(raw, list):
        return None
    output: list[NumStat] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        path = item.get("path")
        added = item.get("added")
        deleted = item.get("deleted")
        if not isinstance(path, str):
            continue
        if not isinstance(added, int) or isinstance(added, bool):
            continue
        if not isinstance(deleted, int) or isinstance(deleted, bool):
            continue
        output.append(NumStat(path=path, added=max(0, added), deleted=max(0, deleted)))
    return tuple(output)


def _parse_bucket_defs(raw: object) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(key): value for key, value in raw.items() if isinstance(value, str)}


def _required_str(raw: dict[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise CorpusFormatError(path=f"{where}.{key}", reason="must be a string")
    return value


def _optional_str(value: object) -> str | None:
    if isinstance(value, str):
        return value
    return None


def _clamped_confidence(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return max(0.0, min(1.0, float(value)))


def _as_list(value: object) -> list[object]:
    if isinstance(value, list):
        return value
    return []
