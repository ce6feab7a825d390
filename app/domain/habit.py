"""Habit rollup - daily completion rate, per-category counts, log value rules"""
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable

from app.domain.metrics import percent

HABIT_CATEGORIES = ("health", "language", "productivity", "learning", "other")
HABIT_FREQUENCIES = ("daily", "weekly", "monthly")
METRIC_TYPES = ("boolean", "minutes", "repetitions", "count")


def find_log(logs: Iterable, habit_id: int, target_date: date | None = None):
    """Log for (habit, day) or None. ``target_date=None`` matches any day."""
    for log in logs:
        if log.habit_id != habit_id:
            continue
        if target_date is None or log.log_date == target_date:
            return log
    return None


def resolve_log_values(
    metric_type: str,
    completed: bool | None = None,
    value: Decimal | int | float | None = None,
) -> dict[str, Any]:
    """
    Fields to store on a habit log.

    boolean habits are toggled: value mirrors completion (1/0).
    Measured habits store the raw value; completion means value > 0.
    """
    if metric_type == "boolean":
        if completed is None:
            completed = bool(value)
        return {"completed": bool(completed), "value": Decimal(1) if completed else Decimal(0)}

    if value is None:
        raise ValueError(f"Value required for metric type {metric_type}")
    raw = value if isinstance(value, Decimal) else Decimal(str(value))
    return {"completed": raw > 0, "value": raw}


def active_habits(habits: Iterable) -> list:
    return [h for h in habits if h.active]


def completion_rate(habits: Iterable, logs: Iterable) -> int:
    """
    round(completed logs / active habits * 100); 0 without active habits.

    ``logs`` are expected to belong to a single day. Logs of inactive or
    unknown habits are ignored.
    """
    active_ids = {h.id for h in active_habits(habits)}
    done = sum(1 for log in logs if log.completed and log.habit_id in active_ids)
    return percent(done, len(active_ids))


def category_counts(habits: Iterable) -> dict[str, int]:
    counts = {c: 0 for c in HABIT_CATEGORIES}
    for h in active_habits(habits):
        if h.category in counts:
            counts[h.category] += 1
        else:
            counts["other"] += 1
    return counts


def shift_day(target: date, days: int) -> date:
    """Day navigation (-1 = previous day, +1 = next day)."""
    return target + timedelta(days=days)


def habit_rollup(habits: Iterable, logs: Iterable, target_date: date) -> dict[str, Any]:
    habits = active_habits(habits)
    active_ids = {h.id for h in habits}
    day_logs = [log for log in logs if log.log_date == target_date]
    return {
        "date": target_date,
        "active_count": len(habits),
        "completed_count": sum(1 for log in day_logs if log.completed and log.habit_id in active_ids),
        "completion_rate": completion_rate(habits, day_logs),
        "categories": category_counts(habits),
    }
