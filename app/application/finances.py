"""
Finances use cases (transactions, financial goals) and read service.
"""
from datetime import date
from typing import List, Dict, Any

from sqlalchemy.orm import Session

from app.infrastructure.db.models import TransactionModel, FinancialGoalModel
from app.domain.finance import (
    TRANSACTION_TYPES, GOAL_STATUSES, TOP_CATEGORIES, financial_rollup,
)
from app.utils.money import format_money, format_percent
from app.utils.validation import parse_non_negative_amount, parse_optional_date


class FinanceValidationError(ValueError):
    pass


def _amount(value) -> Any:
    try:
        return parse_non_negative_amount(value)
    except ValueError as e:
        raise FinanceValidationError(str(e)) from e


def _date(value) -> date | None:
    try:
        return parse_optional_date(value)
    except ValueError as e:
        raise FinanceValidationError(str(e)) from e


def _progress(value) -> int:
    try:
        progress = int(value)
    except (TypeError, ValueError):
        raise FinanceValidationError("Прогресс должен быть целым числом")
    if not 0 <= progress <= 100:
        raise FinanceValidationError("Прогресс должен быть от 0 до 100")
    return progress


# ── Transactions ──

class CreateTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        date: date | str,
        amount,
        type: str,
        category: str,
        method: str | None = None,
        note: str | None = None,
    ) -> int:
        if type not in TRANSACTION_TYPES:
            raise FinanceValidationError(f"Недопустимый тип операции: {type}")
        category = (category or "").strip()
        if not category:
            raise FinanceValidationError("Категория не может быть пустой")
        tx_date = _date(date)
        if tx_date is None:
            raise FinanceValidationError("Дата операции обязательна")

        tx = TransactionModel(
            account_id=account_id,
            date=tx_date,
            amount=_amount(amount),
            type=type,
            category=category,
            method=(method or "").strip() or None,
            note=(note or "").strip() or None,
        )
        self.db.add(tx)
        self.db.flush()
        self.db.commit()
        return tx.id


class UpdateTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, account_id: int, **changes) -> None:
        tx = self.db.query(TransactionModel).filter(
            TransactionModel.id == transaction_id,
            TransactionModel.account_id == account_id,
        ).first()
        if not tx:
            raise FinanceValidationError("Операция не найдена")

        if "type" in changes:
            if changes["type"] not in TRANSACTION_TYPES:
                raise FinanceValidationError(f"Недопустимый тип операции: {changes['type']}")
            tx.type = changes["type"]
        if "amount" in changes:
            tx.amount = _amount(changes["amount"])
        if "date" in changes:
            tx_date = _date(changes["date"])
            if tx_date is None:
                raise FinanceValidationError("Дата операции обязательна")
            tx.date = tx_date
        if "category" in changes:
            category = (changes["category"] or "").strip()
            if not category:
                raise FinanceValidationError("Категория не может быть пустой")
            tx.category = category
        for key in ("method", "note"):
            if key in changes:
                setattr(tx, key, (changes[key] or "").strip() or None)

        self.db.commit()


class DeleteTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, account_id: int) -> None:
        tx = self.db.query(TransactionModel).filter(
            TransactionModel.id == transaction_id,
            TransactionModel.account_id == account_id,
        ).first()
        if not tx:
            raise FinanceValidationError("Операция не найдена")
        self.db.delete(tx)
        self.db.commit()


# ── Financial goals ──

class CreateFinancialGoalUseCase:
    """Progress is whatever the user typed in; it is not linked to transactions."""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        objective: str,
        target_amount,
        target_date: date | str | None = None,
        status: str = "active",
        progress_percentage: int = 0,
        notes: str | None = None,
    ) -> int:
        objective = (objective or "").strip()
        if not objective:
            raise FinanceValidationError("Название цели не может быть пустым")
        if status not in GOAL_STATUSES:
            raise FinanceValidationError(f"Недопустимый статус: {status}")

        goal = FinancialGoalModel(
            account_id=account_id,
            objective=objective,
            target_amount=_amount(target_amount),
            target_date=_date(target_date),
            status=status,
            progress_percentage=_progress(progress_percentage),
            notes=(notes or "").strip() or None,
        )
        self.db.add(goal)
        self.db.flush()
        self.db.commit()
        return goal.id


class UpdateFinancialGoalUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, goal_id: int, account_id: int, **changes) -> None:
        goal = self.db.query(FinancialGoalModel).filter(
            FinancialGoalModel.id == goal_id,
            FinancialGoalModel.account_id == account_id,
        ).first()
        if not goal:
            raise FinanceValidationError("Цель не найдена")

        if "objective" in changes:
            objective = (changes["objective"] or "").strip()
            if not objective:
                raise FinanceValidationError("Название цели не может быть пустым")
            goal.objective = objective
        if "target_amount" in changes:
            goal.target_amount = _amount(changes["target_amount"])
        if "target_date" in changes:
            goal.target_date = _date(changes["target_date"])
        if "status" in changes:
            if changes["status"] not in GOAL_STATUSES:
                raise FinanceValidationError(f"Недопустимый статус: {changes['status']}")
            goal.status = changes["status"]
        if "progress_percentage" in changes:
            goal.progress_percentage = _progress(changes["progress_percentage"])
        if "notes" in changes:
            goal.notes = (changes["notes"] or "").strip() or None

        self.db.commit()


class DeleteFinancialGoalUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, goal_id: int, account_id: int) -> None:
        goal = self.db.query(FinancialGoalModel).filter(
            FinancialGoalModel.id == goal_id,
            FinancialGoalModel.account_id == account_id,
        ).first()
        if not goal:
            raise FinanceValidationError("Цель не найдена")
        self.db.delete(goal)
        self.db.commit()


# ── Read Service ──

class FinanceReadService:
    """Read-only queries for the finances view."""

    def __init__(self, db: Session):
        self.db = db

    def list_transactions(self, account_id: int | None) -> List[TransactionModel]:
        if account_id is None:
            return []
        return (
            self.db.query(TransactionModel)
            .filter(TransactionModel.account_id == account_id)
            .order_by(TransactionModel.date.desc(), TransactionModel.id.desc())
            .all()
        )

    def list_goals(self, account_id: int | None) -> List[FinancialGoalModel]:
        if account_id is None:
            return []
        return (
            self.db.query(FinancialGoalModel)
            .filter(FinancialGoalModel.account_id == account_id)
            .order_by(FinancialGoalModel.created_at.desc(), FinancialGoalModel.id.desc())
            .all()
        )

    def get_summary(
        self,
        account_id: int | None,
        today: date | None = None,
        limit: int = TOP_CATEGORIES,
    ) -> Dict[str, Any]:
        """
        Totals, savings ratio and top expense categories.

        With ``today`` the rollup covers the current calendar month only,
        otherwise every transaction of the account.
        """
        summary = financial_rollup(self.list_transactions(account_id), today=today, limit=limit)
        summary["balance_label"] = format_money(summary["balance"])
        summary["savings_ratio_label"] = format_percent(summary["savings_ratio"])
        return summary
