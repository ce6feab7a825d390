"""Library rollup - status counts, completion rate, type distribution"""
from typing import Any, Iterable

from app.domain.metrics import percent, safe_ratio

LIBRARY_TYPES = ("article", "course", "book", "video", "note", "other")
LIBRARY_STATUSES = ("pending", "in_progress", "completed", "archived")


def parse_tags(tags_csv: str | None) -> list[str] | None:
    """Comma-separated tags, trimmed, empties dropped; None when nothing is left."""
    if not tags_csv:
        return None
    tags = [t.strip() for t in tags_csv.split(",") if t.strip()]
    return tags or None


def filter_items(items: Iterable, status: str | None = None, item_type: str | None = None) -> list:
    """Independent equality filters; None (or "all") disables a filter."""
    result = list(items)
    if status and status != "all":
        result = [i for i in result if i.status == status]
    if item_type and item_type != "all":
        result = [i for i in result if i.type == item_type]
    return result


def status_counts(items: Iterable) -> dict[str, Any]:
    items = list(items)
    counts: dict[str, Any] = {"total": len(items)}
    for status in LIBRARY_STATUSES:
        counts[status] = sum(1 for i in items if i.status == status)
    counts["completion_rate"] = percent(counts["completed"], counts["total"])
    return counts


def type_distribution(items: Iterable) -> list[dict[str, Any]]:
    tally: dict[str, int] = {}
    for i in items:
        tally[i.type] = tally.get(i.type, 0) + 1

    ordered = sorted(tally.items(), key=lambda kv: kv[1], reverse=True)
    max_count = ordered[0][1] if ordered else 1
    return [
        {"type": t, "count": count, "bar_width": round(safe_ratio(count, max_count), 2)}
        for t, count in ordered
    ]
