"""Append-only JSONL record of lab operations."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

FREE_TEXT_KEYS = frozenset({"query", "file_choice"})


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One lab operation.

    The revision, hit and index counters are first-class because every view
    reports at least one of them; anything else lands in ``details`` after
    sanitizing.
    """

    timestamp: str
    request_id: str
    operation: str
    ok: bool = True
    error_code: str | None = None
    revision_index: int | None = None
    hit_count: int | None = None
    indexed: int | None = None
    details: dict[str, object] = field(default_factory=dict)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def utc_timestamp() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_details(details: dict[str, object]) -> dict[str, object]:
    """Reduce user free text to presence and length, collections to a count."""
    sanitized: dict[str, object] = {}
    for key in sorted(details):
        value = details[key]
        if key in FREE_TEXT_KEYS and isinstance(value, str):
            sanitized[f"{key}_present"] = bool(value)
            sanitized[f"{key}_length"] = len(value)
        elif value is None or isinstance(value, (bool, int, float, str)):
            sanitized[key] = value
        elif isinstance(value, (list, tuple, set, frozenset, dict)):
            sanitized[f"{key}_count"] = len(value)
        else:
            sanitized[key] = str(value)
    return sanitized


class LabAuditLog:
    """Writes one event per lab operation, numbering requests per session."""

    def __init__(self, path: Path, session: str = "lab") -> None:
        self._path = path
        self._session = session
        self._counter = 0
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def record(
        self,
        operation: str,
        *,
        ok: bool = True,
        error_code: str | None = None,
        revision_index: int | None = None,
        hit_count: int | None = None,
        indexed: int | None = None,
        **details: object,
    ) -> AuditEvent:
        """Append one event and return it."""
        self._counter += 1
        event = AuditEvent(
            timestamp=utc_timestamp(),
            request_id=f"{self._session}-{self._counter}",
            operation=operation,
            ok=ok,
            error_code=error_code,
            revision_index=revision_index,
            hit_count=hit_count,
            indexed=indexed,
            details=sanitize_details(details),
        )
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(event.to_json_line())
            handle.write("\n")
        return event
