"""
Dashboard: cross-domain snapshot for today and the current month.

Pure read-layer: no mutations. Every metric is an independent read:
  - sequential path (``DashboardService.get_snapshot``): one session
  - fan-out path (``collect_snapshot``): one thread + session per metric,
    joined with asyncio.gather

A metric that fails is reported as unknown (None + listed in "unknown"),
never as 0, and does not affect the others.
"""
import asyncio
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.models import (
    TransactionModel, LibraryItemModel, ContactModel,
    ObjectiveModel, ProjectModel, HabitModel, TaskModel,
)
from app.application.habits import HabitReadService
from app.domain.finance import current_month_window
from app.domain.metrics import UNKNOWN, is_unknown
from app.domain.objective import ACTIVE_OBJECTIVE_STATUSES
from app.domain.project import ACTIVE_PROJECT_STATUSES

logger = logging.getLogger(__name__)

MetricLoader = Callable[[Session, int, date], Any]


# ------------------------------------------------------------------
# Metric loaders: (db, account_id, today) -> value
# ------------------------------------------------------------------

def _count(db: Session, model, account_id: int, *criteria) -> int:
    return (
        db.query(func.count(model.id))
        .filter(model.account_id == account_id, *criteria)
        .scalar()
    ) or 0


def _month_total(db: Session, account_id: int, tx_type: str, today: date) -> Decimal:
    month_start, month_end = current_month_window(today)
    total = (
        db.query(func.coalesce(func.sum(TransactionModel.amount), 0))
        .filter(
            TransactionModel.account_id == account_id,
            TransactionModel.type == tx_type,
            TransactionModel.date >= month_start,
            TransactionModel.date <= month_end,
        )
        .scalar()
    )
    return Decimal(str(total or 0))


def _tasks_completed_today(db: Session, account_id: int, today: date) -> int:
    """Tasks created today that are already done (not "due today")."""
    day_start, day_end = get_settings().local_day_bounds(today)
    return _count(
        db, TaskModel, account_id,
        TaskModel.status == "done",
        TaskModel.created_at >= day_start,
        TaskModel.created_at < day_end,
    )


METRIC_LOADERS: dict[str, MetricLoader] = {
    "transactions": lambda db, a, t: _count(db, TransactionModel, a),
    "month_income": lambda db, a, t: _month_total(db, a, "income", t),
    "month_expenses": lambda db, a, t: _month_total(db, a, "expense", t),
    "library_items": lambda db, a, t: _count(db, LibraryItemModel, a),
    "contacts": lambda db, a, t: _count(db, ContactModel, a),
    "active_objectives": lambda db, a, t: _count(
        db, ObjectiveModel, a, ObjectiveModel.status.in_(ACTIVE_OBJECTIVE_STATUSES),
    ),
    "active_projects": lambda db, a, t: _count(
        db, ProjectModel, a, ProjectModel.status.in_(ACTIVE_PROJECT_STATUSES),
    ),
    "active_habits": lambda db, a, t: _count(db, HabitModel, a, HabitModel.active.is_(True)),
    "tasks_completed_today": _tasks_completed_today,
    "habit_completion_rate": lambda db, a, t: HabitReadService(db).completion_rate(a, t),
}


# ------------------------------------------------------------------
# Snapshot assembly
# ------------------------------------------------------------------

def empty_snapshot(today: date, names=None) -> dict[str, Any]:
    """No current user: zero state, nothing queried."""
    names = list(names or METRIC_LOADERS)
    values = {name: 0 for name in names}
    if "month_income" in values:
        values["month_income"] = Decimal("0")
    if "month_expenses" in values:
        values["month_expenses"] = Decimal("0")
    return _build_snapshot(values, today)


def _build_snapshot(values: dict[str, Any], today: date) -> dict[str, Any]:
    values = dict(values)
    if "month_income" in values and "month_expenses" in values:
        income, expenses = values["month_income"], values["month_expenses"]
        if is_unknown(income) or is_unknown(expenses):
            values["month_balance"] = UNKNOWN
        else:
            values["month_balance"] = income - expenses

    month_start, _ = current_month_window(today)
    snapshot: dict[str, Any] = {"date": today, "month_start": month_start}
    unknown = []
    for name, value in values.items():
        if is_unknown(value):
            unknown.append(name)
            snapshot[name] = None
        else:
            snapshot[name] = value
    snapshot["unknown"] = unknown
    return snapshot


def _run_metric(name: str, loader: MetricLoader, db: Session, account_id: int, today: date) -> Any:
    try:
        return loader(db, account_id, today)
    except Exception:
        logger.exception("Dashboard metric %s failed for account_id=%s", name, account_id)
        # Leave the shared session usable for the next metric
        db.rollback()
        return UNKNOWN


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_snapshot(
        self,
        account_id: int | None,
        today: date,
        loaders: dict[str, MetricLoader] | None = None,
    ) -> dict[str, Any]:
        """All metrics, one after another on this service's session."""
        loaders = loaders or METRIC_LOADERS
        if account_id is None:
            return empty_snapshot(today, loaders)

        values = {
            name: _run_metric(name, loader, self.db, account_id, today)
            for name, loader in loaders.items()
        }
        return _build_snapshot(values, today)


def _load_in_own_session(session_factory, loader: MetricLoader, account_id: int, today: date) -> Any:
    db = session_factory()
    try:
        return loader(db, account_id, today)
    finally:
        db.close()


async def collect_snapshot(
    session_factory,
    account_id: int | None,
    today: date,
    loaders: dict[str, MetricLoader] | None = None,
) -> dict[str, Any]:
    """
    Fan-out: each metric runs in a worker thread with its own session.
    Fan-in: gather with return_exceptions so one failure stays local.
    """
    loaders = loaders or METRIC_LOADERS
    if account_id is None:
        return empty_snapshot(today, loaders)

    names = list(loaders)
    results = await asyncio.gather(
        *(
            asyncio.to_thread(_load_in_own_session, session_factory, loaders[name], account_id, today)
            for name in names
        ),
        return_exceptions=True,
    )

    values: dict[str, Any] = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            logger.error(
                "Dashboard metric %s failed for account_id=%s", name, account_id, exc_info=result,
            )
            values[name] = UNKNOWN
        else:
            values[name] = result
    return _build_snapshot(values, today)
