"""Tests for habits: CRUD, daily log upsert, toggle, day view"""
from datetime import date
from decimal import Decimal

import pytest

from app.infrastructure.db.models import HabitModel, HabitLogModel
from app.application.habits import (
    CreateHabitUseCase, UpdateHabitUseCase, DeleteHabitUseCase,
    SetHabitLogUseCase, ToggleHabitUseCase,
    HabitReadService, HabitValidationError,
)

ACCOUNT = 1
DAY = date(2025, 3, 10)


def _habit(db, title="Read", category="learning", metric_type="boolean", **kw):
    return CreateHabitUseCase(db).execute(
        account_id=ACCOUNT, habit=title, category=category, metric_type=metric_type, **kw,
    )


class TestHabitCrud:
    def test_create(self, db_session):
        hid = _habit(db_session, trigger=" after coffee ")
        h = db_session.query(HabitModel).filter(HabitModel.id == hid).first()
        assert h.habit == "Read"
        assert h.active is True
        assert h.trigger == "after coffee"
        assert h.consistency_score == 0

    def test_invalid_category(self, db_session):
        with pytest.raises(HabitValidationError, match="категория"):
            _habit(db_session, category="sport")

    def test_empty_title(self, db_session):
        with pytest.raises(HabitValidationError):
            _habit(db_session, title="  ")

    def test_deactivate(self, db_session):
        hid = _habit(db_session)
        UpdateHabitUseCase(db_session).execute(hid, ACCOUNT, active=False)
        assert HabitReadService(db_session).list_active_habits(ACCOUNT) == []

    def test_delete_removes_logs(self, db_session):
        hid = _habit(db_session)
        SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True)
        DeleteHabitUseCase(db_session).execute(hid, ACCOUNT)
        assert db_session.query(HabitLogModel).count() == 0
        assert db_session.query(HabitModel).count() == 0


class TestSetHabitLog:
    def test_upsert_keeps_single_row(self, db_session):
        hid = _habit(db_session, metric_type="minutes")
        first = SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, value="15")
        second = SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, value="40", note="long")

        assert first == second
        logs = db_session.query(HabitLogModel).all()
        assert len(logs) == 1
        assert logs[0].value == Decimal("40")
        assert logs[0].completed is True
        assert logs[0].note == "long"

    def test_zero_value_is_not_completed(self, db_session):
        hid = _habit(db_session, metric_type="count")
        SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, value=0)
        assert db_session.query(HabitLogModel).first().completed is False

    def test_boolean_value_mirrors_completion(self, db_session):
        hid = _habit(db_session)
        SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True)
        log = db_session.query(HabitLogModel).first()
        assert log.completed is True
        assert log.value == Decimal("1")

    def test_measured_requires_value(self, db_session):
        hid = _habit(db_session, metric_type="minutes")
        with pytest.raises(HabitValidationError, match="значение"):
            SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True)

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", Decimal("NaN")])
    def test_measured_value_must_be_finite(self, db_session, raw):
        hid = _habit(db_session, metric_type="minutes")
        with pytest.raises(HabitValidationError, match="число"):
            SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, value=raw)
        assert db_session.query(HabitLogModel).count() == 0

    def test_energy_level_range(self, db_session):
        hid = _habit(db_session)
        with pytest.raises(HabitValidationError, match="энергии"):
            SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True, energy_level=11)

    def test_other_days_are_separate(self, db_session):
        hid = _habit(db_session)
        SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True)
        SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, "2025-03-11", completed=True)
        assert db_session.query(HabitLogModel).count() == 2

    def test_unknown_habit(self, db_session):
        with pytest.raises(HabitValidationError, match="не найдена"):
            SetHabitLogUseCase(db_session).execute(ACCOUNT, 404, DAY, completed=True)


class TestToggle:
    def test_toggle_twice(self, db_session):
        hid = _habit(db_session)
        assert ToggleHabitUseCase(db_session).execute(ACCOUNT, hid, DAY) is True
        assert ToggleHabitUseCase(db_session).execute(ACCOUNT, hid, DAY) is False
        assert db_session.query(HabitLogModel).count() == 1

    def test_toggle_measured_rejected(self, db_session):
        hid = _habit(db_session, metric_type="minutes")
        with pytest.raises(HabitValidationError, match="boolean"):
            ToggleHabitUseCase(db_session).execute(ACCOUNT, hid, DAY)


class TestDayView:
    def test_three_of_four(self, db_session):
        ids = [_habit(db_session, title=f"H{i}", category="health") for i in range(4)]
        for hid in ids[:3]:
            SetHabitLogUseCase(db_session).execute(ACCOUNT, hid, DAY, completed=True)

        day = HabitReadService(db_session).get_day(ACCOUNT, DAY)
        assert day["completion_rate"] == 75
        assert day["active_count"] == 4
        assert day["completed_count"] == 3
        assert day["categories"]["health"] == 4
        assert day["previous_date"] == date(2025, 3, 9)
        assert day["next_date"] == date(2025, 3, 11)
        assert sum(1 for h in day["habits"] if h["completed"]) == 3

    def test_no_habits(self, db_session):
        assert HabitReadService(db_session).completion_rate(ACCOUNT, DAY) == 0

    def test_no_user(self, db_session):
        _habit(db_session)
        day = HabitReadService(db_session).get_day(None, DAY)
        assert day["active_count"] == 0
        assert day["habits"] == []
