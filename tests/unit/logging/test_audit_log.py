from __future__ import annotations

import json
from pathlib import Path

from spec_lab.logging import LabAuditLog, sanitize_details


def _records(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_each_record_is_one_json_object_with_typed_lab_fields(tmp_path: Path) -> None:
    log = LabAuditLog(tmp_path / "nested" / "audit.jsonl")
    log.record("search", hit_count=3, indexed=10, query="alpha", max_hits=50)
    log.record("load_corpus", ok=False, error_code="CORPUS_FORMAT", path="$.commits")

    first, second = _records(log.path)
    assert set(first) == {
        "timestamp",
        "request_id",
        "operation",
        "ok",
        "error_code",
        "revision_index",
        "hit_count",
        "indexed",
        "details",
    }
    assert first["hit_count"] == 3
    assert first["indexed"] == 10
    assert first["revision_index"] is None
    assert first["details"] == {"max_hits": 50, "query_length": 5, "query_present": True}
    assert second["ok"] is False
    assert second["error_code"] == "CORPUS_FORMAT"
    assert second["details"] == {"path": "$.commits"}


def test_request_ids_are_numbered_per_session(tmp_path: Path) -> None:
    log = LabAuditLog(tmp_path / "audit.jsonl", session="replay")
    events = [log.record("chart"), log.record("chart")]
    assert [event.request_id for event in events] == ["replay-1", "replay-2"]
    assert events[0].timestamp.endswith("Z")
    assert [record["request_id"] for record in _records(log.path)] == ["replay-1", "replay-2"]


def test_sanitize_reduces_free_text_and_collections() -> None:
    sanitized = sanitize_details(
        {
            "query": "secret phrase",
            "file_choice": "",
            "ceiling": 12,
            "granularity": "day",
            "paths": ["a", "b"],
            "options": {"z": 1},
            "bucket_filter": None,
            "data_dir": Path("state"),
        }
    )
    assert sanitized == {
        "bucket_filter": None,
        "ceiling": 12,
        "data_dir": "state",
        "file_choice_length": 0,
        "file_choice_present": False,
        "granularity": "day",
        "options_count": 1,
        "paths_count": 2,
        "query_length": 13,
        "query_present": True,
    }
    assert "secret phrase" not in json.dumps(sanitized)
