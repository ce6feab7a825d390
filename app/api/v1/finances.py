"""
Finances API endpoints (transactions, financial goals, monthly summary)
"""
from datetime import date as date_type
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, get_today, bad_request
from app.application.finances import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    CreateFinancialGoalUseCase, UpdateFinancialGoalUseCase, DeleteFinancialGoalUseCase,
    FinanceReadService, FinanceValidationError,
)
from app.config import get_settings
from app.utils.validation import validate_and_normalize_amount


router = APIRouter(prefix="/api/v1/finances", tags=["finances"])


# === Request models ===

class TransactionRequest(BaseModel):
    date: date_type
    amount: str  # Decimal as string
    type: str  # income / expense
    category: str
    method: str | None = None
    note: str | None = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        """Валидация и нормализация суммы (точка/запятая, макс 2 знака)"""
        return validate_and_normalize_amount(v, max_decimal_places=2)


class TransactionPatch(BaseModel):
    date: date_type | None = None
    amount: str | None = None
    type: str | None = None
    category: str | None = None
    method: str | None = None
    note: str | None = None


class GoalRequest(BaseModel):
    objective: str
    target_amount: str
    target_date: date_type | None = None
    status: str = "active"
    progress_percentage: int = 0
    notes: str | None = None


class GoalPatch(BaseModel):
    objective: str | None = None
    target_amount: str | None = None
    target_date: date_type | None = None
    status: str | None = None
    progress_percentage: int | None = None
    notes: str | None = None


def _tx_dict(tx) -> dict:
    return {
        "id": tx.id,
        "date": tx.date,
        "amount": str(tx.amount),
        "type": tx.type,
        "category": tx.category,
        "method": tx.method,
        "note": tx.note,
    }


def _goal_dict(g) -> dict:
    return {
        "id": g.id,
        "objective": g.objective,
        "target_amount": str(g.target_amount),
        "target_date": g.target_date,
        "status": g.status,
        "progress_percentage": g.progress_percentage,
        "notes": g.notes,
    }


def _money(value) -> str:
    return str(value) if isinstance(value, Decimal) else value


# === Transactions ===

@router.get("/transactions")
def list_transactions(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    return [_tx_dict(tx) for tx in FinanceReadService(db).list_transactions(account_id)]


@router.post("/transactions", status_code=201)
def create_transaction(
    req: TransactionRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        tx_id = CreateTransactionUseCase(db).execute(account_id=account_id, **req.model_dump())
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"id": tx_id}


@router.patch("/transactions/{transaction_id}")
def update_transaction(
    transaction_id: int,
    req: TransactionPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateTransactionUseCase(db).execute(transaction_id, account_id, **req.model_dump(exclude_unset=True))
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/transactions/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteTransactionUseCase(db).execute(transaction_id, account_id)
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.get("/summary")
def finance_summary(
    month: bool = True,
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
    today: date_type = Depends(get_today),
):
    """Итоги: текущий месяц (по умолчанию) или за всё время"""
    summary = FinanceReadService(db).get_summary(
        account_id,
        today=today if month else None,
        limit=get_settings().DASHBOARD_TOP_CATEGORIES,
    )
    for key in ("total_income", "total_expenses", "balance"):
        summary[key] = _money(summary[key])
    summary["categories"] = [
        {**c, "amount": _money(c["amount"])} for c in summary["categories"]
    ]
    return summary


# === Financial goals ===

@router.get("/goals")
def list_goals(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    return [_goal_dict(g) for g in FinanceReadService(db).list_goals(account_id)]


@router.post("/goals", status_code=201)
def create_goal(
    req: GoalRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        goal_id = CreateFinancialGoalUseCase(db).execute(account_id=account_id, **req.model_dump())
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"id": goal_id}


@router.patch("/goals/{goal_id}")
def update_goal(
    goal_id: int,
    req: GoalPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateFinancialGoalUseCase(db).execute(goal_id, account_id, **req.model_dump(exclude_unset=True))
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/goals/{goal_id}")
def delete_goal(
    goal_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteFinancialGoalUseCase(db).execute(goal_id, account_id)
    except FinanceValidationError as e:
        raise bad_request(e)
    return {"ok": True}
