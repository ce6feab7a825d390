"""
Financial rollup: income / expenses / balance, savings ratio, top expense
categories.

Financial goals are intentionally absent here: their progress_percentage is
entered by the user and is never derived from transactions.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from app.domain.metrics import clamp_percent, safe_ratio

TRANSACTION_TYPES = ("income", "expense")
GOAL_STATUSES = ("active", "completed", "cancelled")

TOP_CATEGORIES = 5


def _amount(tx) -> Decimal:
    value = tx.amount
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def current_month_window(today: date) -> tuple[date, date]:
    """[first day of the month, today], both inclusive."""
    return today.replace(day=1), today


def filter_by_window(transactions: Iterable, start: date, end: date) -> list:
    return [tx for tx in transactions if start <= tx.date <= end]


def summarize_transactions(transactions: Iterable) -> dict[str, Any]:
    """
    Totals for a set of transactions.

    Returns:
        total_income, total_expenses, balance (Decimal, balance may be < 0),
        savings_ratio (raw %, NOT clamped), savings_bar_width (clamped 0..100)
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    count = 0
    for tx in transactions:
        count += 1
        if tx.type == "income":
            total_income += _amount(tx)
        elif tx.type == "expense":
            total_expenses += _amount(tx)

    balance = total_income - total_expenses
    savings_ratio = round(safe_ratio(balance, total_income), 2) if total_income > 0 else 0

    return {
        "count": count,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "balance": balance,
        "savings_ratio": savings_ratio,
        "savings_bar_width": clamp_percent(savings_ratio),
    }


def category_breakdown(transactions: Iterable, limit: int = TOP_CATEGORIES) -> list[dict[str, Any]]:
    """Top expense categories by total amount, widest bar = 100."""
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.type != "expense":
            continue
        totals[tx.category] = totals.get(tx.category, Decimal("0")) + _amount(tx)

    top = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    max_amount = top[0][1] if top else Decimal("1")
    if max_amount == 0:
        max_amount = Decimal("1")

    return [
        {
            "category": category,
            "amount": amount,
            "bar_width": round(safe_ratio(amount, max_amount), 2),
        }
        for category, amount in top
    ]


def financial_rollup(
    transactions: Iterable,
    today: date | None = None,
    limit: int = TOP_CATEGORIES,
) -> dict[str, Any]:
    """Summary + breakdown; restricted to the current month when ``today`` is given."""
    rows = list(transactions)
    if today is not None:
        start, end = current_month_window(today)
        rows = filter_by_window(rows, start, end)

    summary = summarize_transactions(rows)
    summary["categories"] = category_breakdown(rows, limit=limit)
    return summary
