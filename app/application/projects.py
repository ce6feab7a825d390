"""
Projects & tasks use-cases and read service.
"""
from datetime import date as date_type
from typing import List, Dict, Any

from sqlalchemy.orm import Session

from app.infrastructure.db.models import ProjectModel, TaskModel
from app.domain.project import (
    PROJECT_AREAS, PROJECT_TYPES, PROJECT_STATUSES, PRIORITIES, TASK_STATUSES,
    MIN_TIMELINE_DAYS,
    gantt_rows, kanban_buckets, next_status, previous_status,
    project_completion, project_summary, tasks_by_project,
)
from app.utils.validation import parse_non_negative_amount, parse_optional_date


# ── Errors ──

class ProjectValidationError(ValueError):
    pass


def _date(value) -> date_type | None:
    try:
        return parse_optional_date(value)
    except ValueError as e:
        raise ProjectValidationError(str(e)) from e


def _choice(field: str, value, allowed: tuple):
    if value not in allowed:
        raise ProjectValidationError(f"Недопустимое значение {field}: {value}")
    return value


def _str_list(value) -> list[str] | None:
    """list or comma-separated string -> cleaned list (None if empty)"""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    items = [str(v).strip() for v in value if str(v).strip()]
    return items or None


def _check_dates(start: date_type | None, deadline: date_type | None) -> None:
    if start and deadline and deadline < start:
        raise ProjectValidationError("Дедлайн не может быть раньше даты начала")


_PROJECT_TEXT_FIELDS = ("owner", "expected_impact", "risks", "notes")
_TASK_TEXT_FIELDS = ("sprint", "assigned_to", "blockers")


# ── Projects ──

class CreateProjectUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        name: str,
        area: str,
        status: str = "backlog",
        priority: str = "medium",
        type: str | None = None,
        start_date: date_type | str | None = None,
        deadline: date_type | str | None = None,
        stakeholders: list[str] | str | None = None,
        **text_fields,
    ) -> int:
        name = (name or "").strip()
        if not name:
            raise ProjectValidationError("Название проекта не может быть пустым")
        unknown = set(text_fields) - set(_PROJECT_TEXT_FIELDS)
        if unknown:
            raise ProjectValidationError(f"Неизвестные поля: {', '.join(sorted(unknown))}")

        start = _date(start_date)
        end = _date(deadline)
        _check_dates(start, end)

        project = ProjectModel(
            account_id=account_id,
            name=name,
            area=_choice("area", area, PROJECT_AREAS),
            type=_choice("type", type, PROJECT_TYPES) if type else None,
            status=_choice("status", status, PROJECT_STATUSES),
            priority=_choice("priority", priority, PRIORITIES),
            start_date=start,
            deadline=end,
            stakeholders=_str_list(stakeholders),
            **{k: (text_fields.get(k) or "").strip() or None for k in _PROJECT_TEXT_FIELDS},
        )
        self.db.add(project)
        self.db.flush()
        self.db.commit()
        return project.id


class UpdateProjectUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, account_id: int, **changes) -> None:
        project = _get_project(self.db, project_id, account_id)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ProjectValidationError("Название проекта не может быть пустым")
            project.name = name
        if "area" in changes:
            project.area = _choice("area", changes["area"], PROJECT_AREAS)
        if "type" in changes:
            project.type = _choice("type", changes["type"], PROJECT_TYPES) if changes["type"] else None
        if "status" in changes:
            project.status = _choice("status", changes["status"], PROJECT_STATUSES)
        if "priority" in changes:
            project.priority = _choice("priority", changes["priority"], PRIORITIES)
        if "start_date" in changes:
            project.start_date = _date(changes["start_date"])
        if "deadline" in changes:
            project.deadline = _date(changes["deadline"])
        _check_dates(project.start_date, project.deadline)
        if "stakeholders" in changes:
            project.stakeholders = _str_list(changes["stakeholders"])
        for key in _PROJECT_TEXT_FIELDS:
            if key in changes:
                setattr(project, key, (changes[key] or "").strip() or None)

        self.db.commit()


class DeleteProjectUseCase:
    """Hard delete; the project's tasks stay, unlinked."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, account_id: int) -> None:
        project = _get_project(self.db, project_id, account_id)

        self.db.query(TaskModel).filter(
            TaskModel.project_id == project_id,
            TaskModel.account_id == account_id,
        ).update({"project_id": None}, synchronize_session="fetch")

        self.db.delete(project)
        self.db.commit()


def _get_project(db: Session, project_id: int, account_id: int) -> ProjectModel:
    p = db.query(ProjectModel).filter(
        ProjectModel.id == project_id,
        ProjectModel.account_id == account_id,
    ).first()
    if not p:
        raise ProjectValidationError("Проект не найден")
    return p


# ── Tasks ──

class CreateTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        task: str,
        project_id: int | None = None,
        status: str = "todo",
        priority: str = "medium",
        estimation=None,
        deadline: date_type | str | None = None,
        tags: list[str] | str | None = None,
        **text_fields,
    ) -> int:
        task = (task or "").strip()
        if not task:
            raise ProjectValidationError("Название задачи не может быть пустым")
        unknown = set(text_fields) - set(_TASK_TEXT_FIELDS)
        if unknown:
            raise ProjectValidationError(f"Неизвестные поля: {', '.join(sorted(unknown))}")
        if project_id is not None:
            _get_project(self.db, project_id, account_id)

        row = TaskModel(
            account_id=account_id,
            project_id=project_id,
            task=task,
            status=_choice("status", status, TASK_STATUSES),
            priority=_choice("priority", priority, PRIORITIES),
            estimation=_estimation(estimation),
            deadline=_date(deadline),
            tags=_str_list(tags),
            **{k: (text_fields.get(k) or "").strip() or None for k in _TASK_TEXT_FIELDS},
        )
        self.db.add(row)
        self.db.flush()
        self.db.commit()
        return row.id


class UpdateTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int, **changes) -> None:
        row = _get_task(self.db, task_id, account_id)

        if "task" in changes:
            title = (changes["task"] or "").strip()
            if not title:
                raise ProjectValidationError("Название задачи не может быть пустым")
            row.task = title
        if "project_id" in changes:
            if changes["project_id"] is not None:
                _get_project(self.db, changes["project_id"], account_id)
            row.project_id = changes["project_id"]
        if "status" in changes:
            row.status = _choice("status", changes["status"], TASK_STATUSES)
        if "priority" in changes:
            row.priority = _choice("priority", changes["priority"], PRIORITIES)
        if "estimation" in changes:
            row.estimation = _estimation(changes["estimation"])
        if "deadline" in changes:
            row.deadline = _date(changes["deadline"])
        if "tags" in changes:
            row.tags = _str_list(changes["tags"])
        for key in _TASK_TEXT_FIELDS:
            if key in changes:
                setattr(row, key, (changes[key] or "").strip() or None)

        self.db.commit()


class MoveTaskUseCase:
    """Move a task one step along todo <-> in_progress <-> done."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int, direction: str) -> str:
        if direction not in ("next", "previous"):
            raise ProjectValidationError(f"Недопустимое направление: {direction}")
        row = _get_task(self.db, task_id, account_id)

        new_status = next_status(row.status) if direction == "next" else previous_status(row.status)
        if new_status is None:
            raise ProjectValidationError(f"Задачу в статусе {row.status} нельзя сдвинуть ({direction})")

        row.status = new_status
        self.db.commit()
        return new_status


class DeleteTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int) -> None:
        row = _get_task(self.db, task_id, account_id)
        self.db.delete(row)
        self.db.commit()


def _get_task(db: Session, task_id: int, account_id: int) -> TaskModel:
    t = db.query(TaskModel).filter(
        TaskModel.id == task_id,
        TaskModel.account_id == account_id,
    ).first()
    if not t:
        raise ProjectValidationError("Задача не найдена")
    return t


def _estimation(value):
    if value is None or value == "":
        return None
    try:
        return parse_non_negative_amount(value)
    except ValueError as e:
        raise ProjectValidationError(f"Оценка: {e}") from e


# ── Read Service ──

class ProjectReadService:
    """Read-only queries for projects list, kanban board and timeline."""

    def __init__(self, db: Session):
        self.db = db

    def list_projects(self, account_id: int | None) -> List[ProjectModel]:
        if account_id is None:
            return []
        return (
            self.db.query(ProjectModel)
            .filter(ProjectModel.account_id == account_id)
            .order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc())
            .all()
        )

    def list_tasks(self, account_id: int | None) -> List[TaskModel]:
        if account_id is None:
            return []
        return (
            self.db.query(TaskModel)
            .filter(TaskModel.account_id == account_id)
            .order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
            .all()
        )

    def get_overview(self, account_id: int | None) -> Dict[str, Any]:
        """Projects with task completion, plus the status summary."""
        projects = self.list_projects(account_id)
        grouped = tasks_by_project(projects, self.list_tasks(account_id))

        result = []
        for p in projects:
            tasks = grouped[p.id]
            result.append({
                "id": p.id,
                "name": p.name,
                "area": p.area,
                "type": p.type,
                "status": p.status,
                "priority": p.priority,
                "start_date": p.start_date,
                "deadline": p.deadline,
                "owner": p.owner,
                "stakeholders": p.stakeholders or [],
                "total_tasks": len(tasks),
                "done_tasks": sum(1 for t in tasks if t.status == "done"),
                "progress": project_completion(tasks),
            })
        return {"summary": project_summary(projects), "projects": result}

    def get_board(self, account_id: int | None, project_id: int | None = None) -> Dict[str, list]:
        """Kanban columns; each task carries its allowed next/previous status."""
        buckets = kanban_buckets(self.list_tasks(account_id), project_id=project_id)
        return {
            status: [_task_dict(t) for t in tasks]
            for status, tasks in buckets.items()
        }

    def get_timeline(
        self,
        account_id: int | None,
        today: date_type,
        min_days: int = MIN_TIMELINE_DAYS,
    ) -> Dict[str, Any]:
        return gantt_rows(self.list_projects(account_id), today, min_days=min_days)


def _task_dict(t: TaskModel) -> Dict[str, Any]:
    return {
        "id": t.id,
        "project_id": t.project_id,
        "task": t.task,
        "status": t.status,
        "priority": t.priority,
        "estimation": t.estimation,
        "sprint": t.sprint,
        "assigned_to": t.assigned_to,
        "deadline": t.deadline,
        "tags": t.tags or [],
        "blockers": t.blockers,
        "next_status": next_status(t.status),
        "previous_status": previous_status(t.status),
    }
