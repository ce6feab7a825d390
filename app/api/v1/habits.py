"""
Habits API endpoints (habits CRUD, daily log upsert, day view)
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, get_today, bad_request
from app.application.habits import (
    CreateHabitUseCase, UpdateHabitUseCase, DeleteHabitUseCase,
    SetHabitLogUseCase, ToggleHabitUseCase,
    HabitReadService, HabitValidationError,
)


router = APIRouter(prefix="/api/v1/habits", tags=["habits"])


class HabitRequest(BaseModel):
    habit: str
    category: str
    frequency: str = "daily"
    metric_type: str = "boolean"
    trigger: str | None = None
    action: str | None = None
    reward: str | None = None
    active: bool = True


class HabitPatch(BaseModel):
    habit: str | None = None
    category: str | None = None
    frequency: str | None = None
    metric_type: str | None = None
    trigger: str | None = None
    action: str | None = None
    reward: str | None = None
    active: bool | None = None


class HabitLogRequest(BaseModel):
    log_date: date
    completed: bool | None = None
    value: str | None = None
    note: str | None = None
    energy_level: int | None = None


@router.get("/day")
def habits_day(
    day: date | None = None,
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Привычки на день (по умолчанию сегодня) с отметками и процентом выполнения"""
    return HabitReadService(db).get_day(account_id, day or today)


@router.post("", status_code=201)
def create_habit(
    req: HabitRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        habit_id = CreateHabitUseCase(db).execute(account_id=account_id, **req.model_dump())
    except HabitValidationError as e:
        raise bad_request(e)
    return {"id": habit_id}


@router.patch("/{habit_id}")
def update_habit(
    habit_id: int,
    req: HabitPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateHabitUseCase(db).execute(habit_id, account_id, **req.model_dump(exclude_unset=True))
    except HabitValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/{habit_id}")
def delete_habit(
    habit_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteHabitUseCase(db).execute(habit_id, account_id)
    except HabitValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.put("/{habit_id}/log")
def set_habit_log(
    habit_id: int,
    req: HabitLogRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    """Upsert отметки за день: повторный вызов перезаписывает значения"""
    try:
        log_id = SetHabitLogUseCase(db).execute(account_id=account_id, habit_id=habit_id, **req.model_dump())
    except HabitValidationError as e:
        raise bad_request(e)
    return {"id": log_id}


@router.post("/{habit_id}/toggle")
def toggle_habit(
    habit_id: int,
    day: date | None = None,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    try:
        completed = ToggleHabitUseCase(db).execute(account_id, habit_id, day or today)
    except HabitValidationError as e:
        raise bad_request(e)
    return {"completed": completed}
