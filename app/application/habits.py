"""Habit use cases, daily log upsert and the day view read service"""
import logging
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.infrastructure.db.models import HabitModel, HabitLogModel
from app.domain.habit import (
    HABIT_CATEGORIES, HABIT_FREQUENCIES, METRIC_TYPES,
    find_log, habit_rollup, resolve_log_values, shift_day,
)
from app.utils.validation import parse_number, parse_optional_date

logger = logging.getLogger(__name__)

ENERGY_LEVELS = range(1, 11)


class HabitValidationError(ValueError):
    pass


def _get_habit(db: Session, habit_id: int, account_id: int) -> HabitModel:
    habit = db.query(HabitModel).filter(
        HabitModel.id == habit_id,
        HabitModel.account_id == account_id,
    ).first()
    if not habit:
        raise HabitValidationError("Привычка не найдена")
    return habit


def _log_date(value) -> date:
    try:
        log_date = parse_optional_date(value)
    except ValueError as e:
        raise HabitValidationError(str(e)) from e
    if log_date is None:
        raise HabitValidationError("Дата отметки обязательна")
    return log_date


class CreateHabitUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        habit: str,
        category: str,
        frequency: str = "daily",
        metric_type: str = "boolean",
        trigger: str | None = None,
        action: str | None = None,
        reward: str | None = None,
        active: bool = True,
    ) -> int:
        habit = (habit or "").strip()
        if not habit:
            raise HabitValidationError("Название привычки не может быть пустым")
        if category not in HABIT_CATEGORIES:
            raise HabitValidationError(f"Недопустимая категория: {category}")
        if frequency not in HABIT_FREQUENCIES:
            raise HabitValidationError(f"Недопустимая периодичность: {frequency}")
        if metric_type not in METRIC_TYPES:
            raise HabitValidationError(f"Недопустимый тип метрики: {metric_type}")

        row = HabitModel(
            account_id=account_id,
            habit=habit,
            category=category,
            frequency=frequency,
            metric_type=metric_type,
            trigger=(trigger or "").strip() or None,
            action=(action or "").strip() or None,
            reward=(reward or "").strip() or None,
            active=bool(active),
            consistency_score=0,
        )
        self.db.add(row)
        self.db.flush()
        self.db.commit()
        return row.id


class UpdateHabitUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, habit_id: int, account_id: int, **changes) -> None:
        habit = _get_habit(self.db, habit_id, account_id)

        if "habit" in changes:
            title = (changes["habit"] or "").strip()
            if not title:
                raise HabitValidationError("Название привычки не может быть пустым")
            habit.habit = title
        for key, allowed in (
            ("category", HABIT_CATEGORIES),
            ("frequency", HABIT_FREQUENCIES),
            ("metric_type", METRIC_TYPES),
        ):
            if key in changes:
                if changes[key] not in allowed:
                    raise HabitValidationError(f"Недопустимое значение {key}: {changes[key]}")
                setattr(habit, key, changes[key])
        for key in ("trigger", "action", "reward"):
            if key in changes:
                setattr(habit, key, (changes[key] or "").strip() or None)
        if "active" in changes:
            habit.active = bool(changes["active"])

        self.db.commit()


class DeleteHabitUseCase:
    """Hard delete habit together with its logs."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, habit_id: int, account_id: int) -> None:
        habit = _get_habit(self.db, habit_id, account_id)
        self.db.query(HabitLogModel).filter(
            HabitLogModel.habit_id == habit.id,
            HabitLogModel.account_id == account_id,
        ).delete(synchronize_session="fetch")
        self.db.delete(habit)
        self.db.commit()


class SetHabitLogUseCase:
    """
    Upsert the single log of (habit, day): update it if it exists, insert
    otherwise. Repeating the call leaves one row; the last call wins.

    boolean habits take ``completed``; measured habits take ``value``.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        habit_id: int,
        log_date: date | str,
        completed: bool | None = None,
        value=None,
        note: str | None = None,
        energy_level: int | None = None,
    ) -> int:
        habit = _get_habit(self.db, habit_id, account_id)
        log_date = _log_date(log_date)

        if habit.metric_type == "boolean" and completed is None and value is None:
            raise HabitValidationError("Укажите, выполнена ли привычка")
        if habit.metric_type != "boolean" and value is None:
            raise HabitValidationError("Укажите значение метрики")
        if energy_level is not None and energy_level not in ENERGY_LEVELS:
            raise HabitValidationError("Уровень энергии должен быть от 1 до 10")
        try:
            number = parse_number(value) if value is not None else None
        except ValueError as e:
            raise HabitValidationError(str(e)) from e

        fields: dict[str, Any] = resolve_log_values(habit.metric_type, completed=completed, value=number)
        if note is not None:
            fields["note"] = note.strip() or None
        if energy_level is not None:
            fields["energy_level"] = energy_level

        log = self._find(account_id, habit.id, log_date)
        if log is None:
            log = HabitLogModel(account_id=account_id, habit_id=habit.id, log_date=log_date, **fields)
            self.db.add(log)
            try:
                self.db.flush()
            except IntegrityError:
                # Another request inserted the same (habit, day) first
                self.db.rollback()
                logger.warning("Duplicate habit log for habit_id=%s on %s, updating instead", habit_id, log_date)
                log = self._find(account_id, habit_id, log_date)
                if log is None:
                    raise
                self._apply(log, fields)
        else:
            self._apply(log, fields)

        self.db.commit()
        return log.id

    def _find(self, account_id: int, habit_id: int, log_date: date) -> HabitLogModel | None:
        return self.db.query(HabitLogModel).filter(
            HabitLogModel.account_id == account_id,
            HabitLogModel.habit_id == habit_id,
            HabitLogModel.log_date == log_date,
        ).first()

    @staticmethod
    def _apply(log: HabitLogModel, fields: dict[str, Any]) -> None:
        for key, val in fields.items():
            setattr(log, key, val)


class ToggleHabitUseCase:
    """Flip a boolean habit for a day (no log yet counts as not done)."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, habit_id: int, log_date: date | str) -> bool:
        habit = _get_habit(self.db, habit_id, account_id)
        if habit.metric_type != "boolean":
            raise HabitValidationError("Переключать можно только привычки типа boolean")
        log_date = _log_date(log_date)
        existing = self.db.query(HabitLogModel).filter(
            HabitLogModel.account_id == account_id,
            HabitLogModel.habit_id == habit_id,
            HabitLogModel.log_date == log_date,
        ).first()
        completed = not (existing is not None and existing.completed)
        SetHabitLogUseCase(self.db).execute(
            account_id=account_id, habit_id=habit_id, log_date=log_date, completed=completed,
        )
        return completed


# ── Read Service ──

class HabitReadService:
    def __init__(self, db: Session):
        self.db = db

    def list_active_habits(self, account_id: int | None) -> list[HabitModel]:
        if account_id is None:
            return []
        return (
            self.db.query(HabitModel)
            .filter(HabitModel.account_id == account_id, HabitModel.active.is_(True))
            .order_by(HabitModel.created_at.desc(), HabitModel.id.desc())
            .all()
        )

    def logs_for_day(self, account_id: int | None, day: date) -> list[HabitLogModel]:
        if account_id is None:
            return []
        return (
            self.db.query(HabitLogModel)
            .filter(HabitLogModel.account_id == account_id, HabitLogModel.log_date == day)
            .all()
        )

    def get_day(self, account_id: int | None, day: date) -> dict[str, Any]:
        """Habits of the day with their log, completion rate and category tallies."""
        habits = self.list_active_habits(account_id)
        logs = self.logs_for_day(account_id, day)
        result = habit_rollup(habits, logs, day)
        result["previous_date"] = shift_day(day, -1)
        result["next_date"] = shift_day(day, 1)
        result["habits"] = []
        for h in habits:
            log = find_log(logs, h.id, day)
            result["habits"].append({
                "id": h.id,
                "habit": h.habit,
                "category": h.category,
                "frequency": h.frequency,
                "metric_type": h.metric_type,
                "consistency_score": h.consistency_score,
                "completed": bool(log and log.completed),
                "value": log.value if log else None,
                "note": log.note if log else None,
                "energy_level": log.energy_level if log else None,
            })
        return result

    def completion_rate(self, account_id: int | None, day: date) -> int:
        return habit_rollup(
            self.list_active_habits(account_id), self.logs_for_day(account_id, day), day,
        )["completion_rate"]
