"""
Objectives (OKR) use-cases and read service.

Key-result progress_percentage is stored, but always recomputed from
baseline/target/current_value whenever one of them changes.
"""
from datetime import date
from typing import List, Dict, Any

from sqlalchemy.orm import Session

from app.infrastructure.db.models import ObjectiveModel, KeyResultModel
from app.domain.objective import (
    OBJECTIVE_AREAS, OBJECTIVE_PRIORITIES, OBJECTIVE_STATUSES,
    at_risk, group_key_results, key_result_progress, objective_progress, objective_summary,
)
from app.utils.validation import parse_number, parse_optional_date


class ObjectiveValidationError(ValueError):
    pass


def _number(value) -> Any:
    try:
        return parse_number(value)
    except ValueError as e:
        raise ObjectiveValidationError(str(e)) from e


def _date(value) -> date | None:
    try:
        return parse_optional_date(value)
    except ValueError as e:
        raise ObjectiveValidationError(str(e)) from e


def _check_choice(field: str, value: str, allowed: tuple) -> str:
    if value not in allowed:
        raise ObjectiveValidationError(f"Недопустимое значение {field}: {value}")
    return value


# ── Objectives ──

class CreateObjectiveUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        objective: str,
        area: str,
        period: str,
        priority: str = "medium",
        status: str = "active",
        description: str | None = None,
    ) -> int:
        objective = (objective or "").strip()
        if not objective:
            raise ObjectiveValidationError("Название цели не может быть пустым")
        period = (period or "").strip()
        if not period:
            raise ObjectiveValidationError("Период не может быть пустым")

        row = ObjectiveModel(
            account_id=account_id,
            objective=objective,
            area=_check_choice("area", area, OBJECTIVE_AREAS),
            period=period,
            priority=_check_choice("priority", priority, OBJECTIVE_PRIORITIES),
            status=_check_choice("status", status, OBJECTIVE_STATUSES),
            description=(description or "").strip() or None,
        )
        self.db.add(row)
        self.db.flush()
        self.db.commit()
        return row.id


class UpdateObjectiveUseCase:
    """Status is whatever the user picks; progress never changes it."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, objective_id: int, account_id: int, **changes) -> None:
        row = _get_objective(self.db, objective_id, account_id)

        for key in ("objective", "period"):
            if key in changes:
                value = (changes[key] or "").strip()
                if not value:
                    raise ObjectiveValidationError(f"Поле {key} не может быть пустым")
                setattr(row, key, value)
        if "area" in changes:
            row.area = _check_choice("area", changes["area"], OBJECTIVE_AREAS)
        if "priority" in changes:
            row.priority = _check_choice("priority", changes["priority"], OBJECTIVE_PRIORITIES)
        if "status" in changes:
            row.status = _check_choice("status", changes["status"], OBJECTIVE_STATUSES)
        if "description" in changes:
            row.description = (changes["description"] or "").strip() or None

        self.db.commit()


class DeleteObjectiveUseCase:
    """Hard delete objective and its key results."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, objective_id: int, account_id: int) -> None:
        row = _get_objective(self.db, objective_id, account_id)
        self.db.query(KeyResultModel).filter(
            KeyResultModel.objective_id == row.id,
            KeyResultModel.account_id == account_id,
        ).delete(synchronize_session="fetch")
        self.db.delete(row)
        self.db.commit()


def _get_objective(db: Session, objective_id: int, account_id: int) -> ObjectiveModel:
    row = db.query(ObjectiveModel).filter(
        ObjectiveModel.id == objective_id,
        ObjectiveModel.account_id == account_id,
    ).first()
    if not row:
        raise ObjectiveValidationError("Цель не найдена")
    return row


# ── Key results ──

class CreateKeyResultUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        objective_id: int,
        key_result: str,
        metric: str,
        target,
        baseline=0,
        current_value=None,
        target_date: date | str | None = None,
    ) -> int:
        _get_objective(self.db, objective_id, account_id)
        key_result = (key_result or "").strip()
        if not key_result:
            raise ObjectiveValidationError("Ключевой результат не может быть пустым")
        metric = (metric or "").strip()
        if not metric:
            raise ObjectiveValidationError("Метрика не может быть пустой")

        baseline = _number(baseline)
        target = _number(target)
        # A fresh key result starts at its baseline
        current = baseline if current_value is None else _number(current_value)

        kr = KeyResultModel(
            account_id=account_id,
            objective_id=objective_id,
            key_result=key_result,
            metric=metric,
            baseline=baseline,
            target=target,
            current_value=current,
            target_date=_date(target_date),
            progress_percentage=key_result_progress(baseline, target, current),
        )
        self.db.add(kr)
        self.db.flush()
        self.db.commit()
        return kr.id


class UpdateKeyResultUseCase:
    """Edit a key result; progress follows any baseline/target/current change."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, key_result_id: int, account_id: int, **changes) -> int:
        kr = _get_key_result(self.db, key_result_id, account_id)

        for key in ("key_result", "metric"):
            if key in changes:
                value = (changes[key] or "").strip()
                if not value:
                    raise ObjectiveValidationError(f"Поле {key} не может быть пустым")
                setattr(kr, key, value)
        for key in ("baseline", "target", "current_value"):
            if key in changes:
                setattr(kr, key, _number(changes[key]))
        if "target_date" in changes:
            kr.target_date = _date(changes["target_date"])

        kr.progress_percentage = key_result_progress(kr.baseline, kr.target, kr.current_value)
        self.db.commit()
        return kr.progress_percentage


class UpdateKeyResultValueUseCase:
    """The quick "+/-" edit from the objective card."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, key_result_id: int, account_id: int, current_value) -> int:
        return UpdateKeyResultUseCase(self.db).execute(
            key_result_id, account_id, current_value=current_value,
        )


class DeleteKeyResultUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, key_result_id: int, account_id: int) -> None:
        kr = _get_key_result(self.db, key_result_id, account_id)
        self.db.delete(kr)
        self.db.commit()


def _get_key_result(db: Session, key_result_id: int, account_id: int) -> KeyResultModel:
    kr = db.query(KeyResultModel).filter(
        KeyResultModel.id == key_result_id,
        KeyResultModel.account_id == account_id,
    ).first()
    if not kr:
        raise ObjectiveValidationError("Ключевой результат не найден")
    return kr


# ── Read Service ──

class ObjectiveReadService:
    """Objectives with their key results and average progress."""

    def __init__(self, db: Session):
        self.db = db

    def list_objectives(self, account_id: int | None) -> List[Dict[str, Any]]:
        objectives, grouped = self._load(account_id)
        return [_objective_dict(o, grouped[o.id]) for o in objectives]

    def get_overview(self, account_id: int | None) -> Dict[str, Any]:
        objectives, grouped = self._load(account_id)
        return {
            "summary": objective_summary(objectives),
            "at_risk": [_objective_dict(o, grouped[o.id]) for o in at_risk(objectives)],
            "objectives": [_objective_dict(o, grouped[o.id]) for o in objectives],
        }

    def _load(self, account_id: int | None) -> tuple[list[ObjectiveModel], Dict[int, list]]:
        if account_id is None:
            return [], {}
        objectives = (
            self.db.query(ObjectiveModel)
            .filter(ObjectiveModel.account_id == account_id)
            .order_by(ObjectiveModel.created_at.desc(), ObjectiveModel.id.desc())
            .all()
        )
        if not objectives:
            return [], {}

        key_results = (
            self.db.query(KeyResultModel)
            .filter(
                KeyResultModel.account_id == account_id,
                KeyResultModel.objective_id.in_([o.id for o in objectives]),
            )
            .order_by(KeyResultModel.id)
            .all()
        )
        return objectives, group_key_results(objectives, key_results)


def _objective_dict(o: ObjectiveModel, key_results: list[KeyResultModel]) -> Dict[str, Any]:
    return {
        "id": o.id,
        "objective": o.objective,
        "area": o.area,
        "period": o.period,
        "priority": o.priority,
        "status": o.status,
        "description": o.description,
        "created_at": o.created_at,
        "progress": objective_progress(key_results),
        "key_results": [_kr_dict(kr) for kr in key_results],
    }


def _kr_dict(kr: KeyResultModel) -> Dict[str, Any]:
    return {
        "id": kr.id,
        "objective_id": kr.objective_id,
        "key_result": kr.key_result,
        "metric": kr.metric,
        "baseline": kr.baseline,
        "target": kr.target,
        "current_value": kr.current_value,
        "target_date": kr.target_date,
        "progress_percentage": kr.progress_percentage,
    }
