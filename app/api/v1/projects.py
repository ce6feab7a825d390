"""
Projects & tasks API endpoints (overview, kanban board, timeline)
"""
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, get_today, bad_request
from app.application.projects import (
    CreateProjectUseCase, UpdateProjectUseCase, DeleteProjectUseCase,
    CreateTaskUseCase, UpdateTaskUseCase, MoveTaskUseCase, DeleteTaskUseCase,
    ProjectReadService, ProjectValidationError,
)
from app.config import get_settings


router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


class ProjectRequest(BaseModel):
    name: str
    area: str
    status: str = "backlog"
    priority: str = "medium"
    type: str | None = None
    start_date: date | None = None
    deadline: date | None = None
    stakeholders: list[str] | None = None
    owner: str | None = None
    expected_impact: str | None = None
    risks: str | None = None
    notes: str | None = None


class ProjectPatch(BaseModel):
    name: str | None = None
    area: str | None = None
    status: str | None = None
    priority: str | None = None
    type: str | None = None
    start_date: date | None = None
    deadline: date | None = None
    stakeholders: list[str] | None = None
    owner: str | None = None
    expected_impact: str | None = None
    risks: str | None = None
    notes: str | None = None


class TaskRequest(BaseModel):
    task: str
    project_id: int | None = None
    status: str = "todo"
    priority: str = "medium"
    estimation: str | None = None
    deadline: date | None = None
    tags: list[str] | None = None
    sprint: str | None = None
    assigned_to: str | None = None
    blockers: str | None = None


class TaskPatch(BaseModel):
    task: str | None = None
    project_id: int | None = None
    status: str | None = None
    priority: str | None = None
    estimation: str | None = None
    deadline: date | None = None
    tags: list[str] | None = None
    sprint: str | None = None
    assigned_to: str | None = None
    blockers: str | None = None


class MoveTaskRequest(BaseModel):
    direction: Literal["next", "previous"]


@router.get("")
def projects_overview(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    return ProjectReadService(db).get_overview(account_id)


@router.get("/board")
def projects_board(
    project_id: int | None = None,
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    return ProjectReadService(db).get_board(account_id, project_id=project_id)


@router.get("/timeline")
def projects_timeline(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    return ProjectReadService(db).get_timeline(
        account_id, today, min_days=get_settings().TIMELINE_MIN_DAYS,
    )


@router.post("", status_code=201)
def create_project(
    req: ProjectRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        project_id = CreateProjectUseCase(db).execute(account_id=account_id, **req.model_dump())
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"id": project_id}


@router.patch("/{project_id}")
def update_project(
    project_id: int,
    req: ProjectPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateProjectUseCase(db).execute(project_id, account_id, **req.model_dump(exclude_unset=True))
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteProjectUseCase(db).execute(project_id, account_id)
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"ok": True}


# === Tasks ===

@router.post("/tasks", status_code=201)
def create_task(
    req: TaskRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        task_id = CreateTaskUseCase(db).execute(account_id=account_id, **req.model_dump())
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"id": task_id}


@router.patch("/tasks/{task_id}")
def update_task(
    task_id: int,
    req: TaskPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateTaskUseCase(db).execute(task_id, account_id, **req.model_dump(exclude_unset=True))
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.post("/tasks/{task_id}/move")
def move_task(
    task_id: int,
    req: MoveTaskRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        status = MoveTaskUseCase(db).execute(task_id, account_id, req.direction)
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"status": status}


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteTaskUseCase(db).execute(task_id, account_id)
    except ProjectValidationError as e:
        raise bad_request(e)
    return {"ok": True}
