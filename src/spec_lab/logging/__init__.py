"""JSONL audit trail for lab operations."""

from .audit import AuditEvent, LabAuditLog, sanitize_details, utc_timestamp

__all__ = ["AuditEvent", "LabAuditLog", "sanitize_details", "utc_timestamp"]
