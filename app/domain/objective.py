"""
Objective / key-result rollup.

Key-result progress is always derived from (baseline, target, current_value).
Objective status is set by the user: an objective with low progress is NOT
moved to at_risk automatically.
"""
from decimal import Decimal
from typing import Any, Iterable

from app.domain.metrics import clamp_percent, round_half_up, safe_ratio

OBJECTIVE_AREAS = ("personal", "professional")
OBJECTIVE_PRIORITIES = ("low", "medium", "high", "critical")
OBJECTIVE_STATUSES = ("active", "on_track", "at_risk", "completed", "cancelled")
ACTIVE_OBJECTIVE_STATUSES = ("active", "on_track", "at_risk")


def key_result_progress(
    baseline: Decimal | int | float,
    target: Decimal | int | float,
    current_value: Decimal | int | float,
) -> int:
    """
    clamp(0, 100, round((current - baseline) / (target - baseline) * 100))

    target == baseline has no meaningful progress and yields 0.
    """
    span = Decimal(str(target)) - Decimal(str(baseline))
    moved = Decimal(str(current_value)) - Decimal(str(baseline))
    return clamp_percent(round_half_up(safe_ratio(moved, span)))


def objective_progress(key_results: Iterable) -> int:
    """Mean of the key results' stored progress, rounded; 0 when there are none."""
    values = [kr.progress_percentage for kr in key_results]
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def group_key_results(objectives: Iterable, key_results: Iterable) -> dict[int, list]:
    """objective_id -> key results, only for the loaded objectives."""
    grouped: dict[int, list] = {o.id: [] for o in objectives}
    for kr in key_results:
        if kr.objective_id in grouped:
            grouped[kr.objective_id].append(kr)
    return grouped


def at_risk(objectives: Iterable) -> list:
    return [o for o in objectives if o.status == "at_risk"]


def objective_summary(objectives: Iterable) -> dict[str, Any]:
    objectives = list(objectives)
    return {
        "total": len(objectives),
        "personal": sum(1 for o in objectives if o.area == "personal"),
        "professional": sum(1 for o in objectives if o.area == "professional"),
        "on_track": sum(1 for o in objectives if o.status == "on_track"),
        "at_risk": sum(1 for o in objectives if o.status == "at_risk"),
    }
