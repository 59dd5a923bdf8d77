"""Publication lifecycle shared by every content collection."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class PublicationStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


# Filter alias: rows that are neither published nor archived (including NULL status)
UNPUBLISHED = "unpublished"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def lifecycle_updates(new_status: Optional[str], existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Columns to write alongside a status change.

    ``published_at`` is only stamped the first time a row is published and
    ``archived_at`` is kept when the row is already archived, so repeating a
    transition does not move its timestamp.
    """
    updates: Dict[str, Any] = {}
    if new_status is None:
        return updates
    updates["status"] = new_status
    existing = existing or {}
    if new_status == PublicationStatus.PUBLISHED.value and not existing.get("published_at"):
        updates["published_at"] = utc_now_iso()
    elif new_status == PublicationStatus.ARCHIVED.value:
        if existing.get("status") == PublicationStatus.ARCHIVED.value and existing.get("archived_at"):
            updates["archived_at"] = existing["archived_at"]
        else:
            updates["archived_at"] = utc_now_iso()
    return updates


def parse_status_filter(raw: Optional[str]) -> List[str]:
    """Split a comma separated status filter, e.g. "published,draft"."""
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


def apply_status_filter(query, raw: Optional[str]):
    statuses = parse_status_filter(raw)
    if not statuses:
        return query
    if statuses == [UNPUBLISHED]:
        return query.or_("status.is.null,status.not.in.(published,archived)")
    return query.in_("status", statuses)


def count_by_status(rows: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    counts = {UNPUBLISHED: 0, PublicationStatus.PUBLISHED.value: 0, PublicationStatus.ARCHIVED.value: 0}
    for row in rows:
        value = row.get("status")
        if value in (PublicationStatus.PUBLISHED.value, PublicationStatus.ARCHIVED.value):
            counts[value] += 1
        else:
            counts[UNPUBLISHED] += 1
    return counts
