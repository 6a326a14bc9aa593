"""
Read access to a persisted audit trail.

Walks a FileAuditSink store and returns records oldest first.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .record import AuditRecord
from .sink import FileAuditSink
from .vocabulary import AuditCategory

logger = logging.getLogger(__name__)


def read_trail(
    store_dir: Path,
    audit_root: str = "/",
    last_n: int | None = None,
    categories: list[AuditCategory] | None = None,
) -> list[AuditRecord]:
    """
    Read audit records with optional filtering.

    Args:
        store_dir: FileAuditSink store directory
        audit_root: Only records below this path
        last_n: If specified, return only the last N records
        categories: Filter to specific categories; an empty list matches nothing

    Returns:
        Records ordered by occurred_at, then record_path
    """
    sink = FileAuditSink(store_dir)
    records = []
    for record_file in sink.iter_record_files(audit_root):
        try:
            record = AuditRecord.from_dict(json.loads(record_file.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("Skipping unreadable record %s: %s", record_file, e)
            continue

        if categories is not None and record.category not in categories:
            continue
        records.append(record)

    records.sort(key=lambda r: (r.occurred_at, r.record_path))
    if last_n is not None:
        return records[-last_n:] if last_n > 0 else []
    return records


def get_record(store_dir: Path, record_path: str) -> AuditRecord | None:
    """Fetch one record by its path."""
    return FileAuditSink(store_dir).read(record_path)


def format_record(record: AuditRecord) -> str:
    """Format a record for human-readable display."""
    icon = {
        AuditCategory.CONTENT_ADDED: "+",
        AuditCategory.OBJECT_ADDED: "+",
        AuditCategory.CONTENT_MODIFIED: "~",
        AuditCategory.OBJECT_MODIFIED: "~",
        AuditCategory.CONTENT_REMOVED: "-",
        AuditCategory.OBJECT_REMOVED: "-",
    }.get(record.category, "?")

    category = record.category.value if record.category else "uncategorized"
    lines = [f"{icon} [{category}] {record.occurred_at} {record.record_path}"]

    if record.related_resource:
        lines.append(f"  resource: {record.related_resource}")
    if record.agents:
        lines.append(f"  agents: {', '.join(record.agents)}")

    return "\n".join(lines)
