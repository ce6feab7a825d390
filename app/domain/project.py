"""
Project / task rollup.

Task status chain (no skipping, no branching):

    todo <-> in_progress <-> done

Kanban buckets and the timeline are computed views; nothing here is stored.
"""
from datetime import date, timedelta
from typing import Any, Iterable

from app.domain.metrics import clamp_percent, percent, round_half_up, safe_ratio

PROJECT_AREAS = ("personal", "professional")
PROJECT_TYPES = ("work", "personal", "learning", "other")
PROJECT_STATUSES = ("backlog", "in_progress", "blocked", "completed", "cancelled")
ACTIVE_PROJECT_STATUSES = ("in_progress", "backlog")
PRIORITIES = ("low", "medium", "high", "critical")

TASK_STATUSES = ("todo", "in_progress", "done")

_NEXT_STATUS = {"todo": "in_progress", "in_progress": "done", "done": None}
_PREV_STATUS = {"todo": None, "in_progress": "todo", "done": "in_progress"}

MIN_TIMELINE_DAYS = 30


def next_status(status: str) -> str | None:
    if status not in _NEXT_STATUS:
        raise ValueError(f"Unknown task status: {status}")
    return _NEXT_STATUS[status]


def previous_status(status: str) -> str | None:
    if status not in _PREV_STATUS:
        raise ValueError(f"Unknown task status: {status}")
    return _PREV_STATUS[status]


def project_completion(tasks: Iterable) -> int:
    """round(done / total * 100); 0 for a project without tasks."""
    tasks = list(tasks)
    done = sum(1 for t in tasks if t.status == "done")
    return percent(done, len(tasks))


def tasks_by_project(projects: Iterable, tasks: Iterable) -> dict[int, list]:
    grouped: dict[int, list] = {p.id: [] for p in projects}
    for t in tasks:
        if t.project_id in grouped:
            grouped[t.project_id].append(t)
    return grouped


def kanban_buckets(tasks: Iterable, project_id: int | None = None) -> dict[str, list]:
    """Partition tasks into todo / in_progress / done, optionally for one project."""
    buckets: dict[str, list] = {s: [] for s in TASK_STATUSES}
    for t in tasks:
        if project_id is not None and t.project_id != project_id:
            continue
        if t.status in buckets:
            buckets[t.status].append(t)
    return buckets


def timeline_progress(start: date, deadline: date, today: date) -> int:
    """Share of the project's calendar span already elapsed, 0..100."""
    if today <= start:
        return 0
    if today >= deadline:
        return 100
    elapsed = (today - start).days
    span = (deadline - start).days
    return clamp_percent(round_half_up(safe_ratio(elapsed, span)))


def timeline_window(projects: Iterable, min_days: int = MIN_TIMELINE_DAYS) -> tuple[date, date] | None:
    """
    Earliest start_date .. latest deadline over all projects, at least
    ``min_days`` long. None when no project carries any date.
    """
    starts = [p.start_date for p in projects if p.start_date is not None]
    deadlines = [p.deadline for p in projects if p.deadline is not None]
    if not starts and not deadlines:
        return None

    window_start = min(starts) if starts else min(deadlines)
    window_end = max(deadlines) if deadlines else max(starts)
    if window_end < window_start:
        window_end = window_start
    if (window_end - window_start).days < min_days:
        window_end = window_start + timedelta(days=min_days)
    return window_start, window_end


def gantt_rows(projects: Iterable, today: date, min_days: int = MIN_TIMELINE_DAYS) -> dict[str, Any]:
    """Bars for projects that have both start_date and deadline."""
    projects = list(projects)
    window = timeline_window(projects, min_days=min_days)
    rows = []
    if window is not None:
        window_start, window_end = window
        total_days = (window_end - window_start).days
        for p in projects:
            if p.start_date is None or p.deadline is None:
                continue
            rows.append({
                "project_id": p.id,
                "name": p.name,
                "status": p.status,
                "start_date": p.start_date,
                "deadline": p.deadline,
                "offset_pct": round(safe_ratio((p.start_date - window_start).days, total_days), 2),
                "width_pct": round(safe_ratio((p.deadline - p.start_date).days, total_days), 2),
                "progress": timeline_progress(p.start_date, p.deadline, today),
            })
    return {
        "window_start": window[0] if window else None,
        "window_end": window[1] if window else None,
        "rows": rows,
    }


def project_summary(projects: Iterable) -> dict[str, int]:
    projects = list(projects)
    summary = {"total": len(projects)}
    for status in ("backlog", "in_progress", "blocked", "completed"):
        summary[status] = sum(1 for p in projects if p.status == status)
    return summary
