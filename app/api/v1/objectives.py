"""
Objectives & key results API endpoints
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, bad_request
from app.application.objectives import (
    CreateObjectiveUseCase, UpdateObjectiveUseCase, DeleteObjectiveUseCase,
    CreateKeyResultUseCase, UpdateKeyResultUseCase, UpdateKeyResultValueUseCase,
    DeleteKeyResultUseCase,
    ObjectiveReadService, ObjectiveValidationError,
)


router = APIRouter(prefix="/api/v1/objectives", tags=["objectives"])


class ObjectiveRequest(BaseModel):
    objective: str
    area: str
    period: str
    priority: str = "medium"
    status: str = "active"
    description: str | None = None


class ObjectivePatch(BaseModel):
    objective: str | None = None
    area: str | None = None
    period: str | None = None
    priority: str | None = None
    status: str | None = None
    description: str | None = None


class KeyResultRequest(BaseModel):
    key_result: str
    metric: str
    target: str
    baseline: str = "0"
    current_value: str | None = None
    target_date: date | None = None


class KeyResultPatch(BaseModel):
    key_result: str | None = None
    metric: str | None = None
    target: str | None = None
    baseline: str | None = None
    current_value: str | None = None
    target_date: date | None = None


class KeyResultValueRequest(BaseModel):
    current_value: str


@router.get("")
def objectives_overview(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    return ObjectiveReadService(db).get_overview(account_id)


@router.post("", status_code=201)
def create_objective(
    req: ObjectiveRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        objective_id = CreateObjectiveUseCase(db).execute(account_id=account_id, **req.model_dump())
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"id": objective_id}


@router.patch("/{objective_id}")
def update_objective(
    objective_id: int,
    req: ObjectivePatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateObjectiveUseCase(db).execute(objective_id, account_id, **req.model_dump(exclude_unset=True))
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/{objective_id}")
def delete_objective(
    objective_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteObjectiveUseCase(db).execute(objective_id, account_id)
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"ok": True}


# === Key results ===

@router.post("/{objective_id}/key-results", status_code=201)
def create_key_result(
    objective_id: int,
    req: KeyResultRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        kr_id = CreateKeyResultUseCase(db).execute(
            account_id=account_id, objective_id=objective_id, **req.model_dump(),
        )
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"id": kr_id}


@router.patch("/key-results/{key_result_id}")
def update_key_result(
    key_result_id: int,
    req: KeyResultPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        progress = UpdateKeyResultUseCase(db).execute(
            key_result_id, account_id, **req.model_dump(exclude_unset=True),
        )
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"progress_percentage": progress}


@router.put("/key-results/{key_result_id}/value")
def update_key_result_value(
    key_result_id: int,
    req: KeyResultValueRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        progress = UpdateKeyResultValueUseCase(db).execute(key_result_id, account_id, req.current_value)
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"progress_percentage": progress}


@router.delete("/key-results/{key_result_id}")
def delete_key_result(
    key_result_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteKeyResultUseCase(db).execute(key_result_id, account_id)
    except ObjectiveValidationError as e:
        raise bad_request(e)
    return {"ok": True}
