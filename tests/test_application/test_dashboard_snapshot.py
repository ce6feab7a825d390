"""Tests for the dashboard snapshot (sequential and fan-out paths)"""
import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal

from app.config import Settings
from app.infrastructure.db.models import TaskModel
from app.application.dashboard import DashboardService, METRIC_LOADERS, collect_snapshot
from app.application.finances import CreateTransactionUseCase
from app.application.habits import CreateHabitUseCase, SetHabitLogUseCase
from app.application.objectives import CreateObjectiveUseCase
from app.application.projects import CreateProjectUseCase
from app.application.library import CreateLibraryItemUseCase
from app.application.contacts import CreateContactUseCase

ACCOUNT = 1
TODAY = date(2025, 3, 10)


def _seed(db):
    tx = CreateTransactionUseCase(db)
    tx.execute(account_id=ACCOUNT, date=date(2025, 3, 1), amount="1000", type="income", category="salary")
    tx.execute(account_id=ACCOUNT, date=date(2025, 3, 2), amount="250", type="expense", category="food")
    tx.execute(account_id=ACCOUNT, date=date(2025, 2, 27), amount="70", type="expense", category="food")

    CreateLibraryItemUseCase(db).execute(account_id=ACCOUNT, title="SICP", type="book")
    CreateContactUseCase(db).execute(account_id=ACCOUNT, name="Anna")

    objectives = CreateObjectiveUseCase(db)
    objectives.execute(account_id=ACCOUNT, objective="A", area="personal", period="Q1")
    objectives.execute(account_id=ACCOUNT, objective="B", area="personal", period="Q1", status="completed")

    projects = CreateProjectUseCase(db)
    projects.execute(account_id=ACCOUNT, name="P1", area="personal", status="in_progress")
    projects.execute(account_id=ACCOUNT, name="P2", area="personal", status="completed")

    # Europe/Madrid is UTC+1 in March: local 00:30 on the 10th is 23:30 UTC on the 9th
    db.add_all([
        TaskModel(account_id=ACCOUNT, task="done after local midnight", status="done", priority="medium",
                  created_at=datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc)),
        TaskModel(account_id=ACCOUNT, task="open today", status="todo", priority="medium",
                  created_at=datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)),
        TaskModel(account_id=ACCOUNT, task="done yesterday", status="done", priority="medium",
                  created_at=datetime(2025, 3, 9, 22, 59, tzinfo=timezone.utc)),
        TaskModel(account_id=ACCOUNT, task="done early tomorrow", status="done", priority="medium",
                  created_at=datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc)),
    ])
    db.commit()

    habits = CreateHabitUseCase(db)
    h1 = habits.execute(account_id=ACCOUNT, habit="Run", category="health")
    habits.execute(account_id=ACCOUNT, habit="Read", category="learning")
    SetHabitLogUseCase(db).execute(ACCOUNT, h1, TODAY, completed=True)


def _boom(db, account_id, today):
    raise RuntimeError("metric backend down")


class TestSequentialSnapshot:
    def test_all_metrics(self, db_session):
        _seed(db_session)
        snap = DashboardService(db_session).get_snapshot(ACCOUNT, TODAY)

        assert snap["unknown"] == []
        assert snap["date"] == TODAY
        assert snap["month_start"] == date(2025, 3, 1)
        assert snap["transactions"] == 3
        assert snap["month_income"] == Decimal("1000")
        assert snap["month_expenses"] == Decimal("250")
        assert snap["month_balance"] == Decimal("750")
        assert snap["library_items"] == 1
        assert snap["contacts"] == 1
        assert snap["active_objectives"] == 1
        assert snap["active_projects"] == 1
        assert snap["active_habits"] == 2
        assert snap["tasks_completed_today"] == 1
        assert snap["habit_completion_rate"] == 50

    def test_failed_metric_is_unknown_not_zero(self, db_session):
        _seed(db_session)
        loaders = {**METRIC_LOADERS, "month_expenses": _boom}
        snap = DashboardService(db_session).get_snapshot(ACCOUNT, TODAY, loaders=loaders)

        assert snap["month_expenses"] is None
        assert snap["month_balance"] is None
        assert set(snap["unknown"]) == {"month_expenses", "month_balance"}
        # the rest is unaffected
        assert snap["month_income"] == Decimal("1000")
        assert snap["contacts"] == 1
        assert snap["habit_completion_rate"] == 50

    def test_no_user_gives_empty_snapshot(self, db_session):
        _seed(db_session)
        snap = DashboardService(db_session).get_snapshot(None, TODAY)
        assert snap["transactions"] == 0
        assert snap["month_balance"] == Decimal("0")
        assert snap["habit_completion_rate"] == 0
        assert snap["unknown"] == []

    def test_empty_account(self, db_session):
        snap = DashboardService(db_session).get_snapshot(ACCOUNT, TODAY)
        assert snap["transactions"] == 0
        assert snap["month_balance"] == Decimal("0")
        assert snap["habit_completion_rate"] == 0


class TestFanOutSnapshot:
    def test_matches_sequential(self, file_session_factory):
        db = file_session_factory()
        try:
            _seed(db)
            expected = DashboardService(db).get_snapshot(ACCOUNT, TODAY)
        finally:
            db.close()

        snap = asyncio.run(collect_snapshot(file_session_factory, ACCOUNT, TODAY))
        assert snap == expected

    def test_one_failure_stays_local(self, file_session_factory):
        db = file_session_factory()
        try:
            _seed(db)
        finally:
            db.close()

        loaders = {**METRIC_LOADERS, "contacts": _boom}
        snap = asyncio.run(collect_snapshot(file_session_factory, ACCOUNT, TODAY, loaders=loaders))
        assert snap["contacts"] is None
        assert snap["unknown"] == ["contacts"]
        assert snap["library_items"] == 1
        assert snap["month_balance"] == Decimal("750")

    def test_no_user_queries_nothing(self):
        def _factory():
            raise AssertionError("no session expected")

        snap = asyncio.run(collect_snapshot(_factory, None, TODAY))
        assert snap["active_habits"] == 0
        assert snap["unknown"] == []


class TestLocalDayBounds:
    def test_winter_day_in_utc(self):
        start, end = Settings(TIMEZONE="Europe/Madrid").local_day_bounds(date(2025, 3, 10))
        assert start == datetime(2025, 3, 9, 23, 0, tzinfo=timezone.utc)
        assert end == datetime(2025, 3, 10, 23, 0, tzinfo=timezone.utc)

    def test_summer_day_in_utc(self):
        start, end = Settings(TIMEZONE="Europe/Madrid").local_day_bounds(date(2025, 7, 1))
        assert start == datetime(2025, 6, 30, 22, 0, tzinfo=timezone.utc)
        assert end == datetime(2025, 7, 1, 22, 0, tzinfo=timezone.utc)

    def test_dst_day_is_23_hours(self):
        start, end = Settings(TIMEZONE="Europe/Madrid").local_day_bounds(date(2025, 3, 30))
        assert (end - start).total_seconds() == 23 * 3600
