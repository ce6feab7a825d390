"""
Unified money formatting for the whole project.

Usage:
    from app.utils.money import format_money

    format_money(15000)            -> "$15,000.00"
    format_money(-1200.5)          -> "-$1,200.50"
    format_money(300, "EUR")       -> "300.00 EUR"
"""
from decimal import Decimal

# Символ-префикс для USD, для остальных ISO-код суффиксом
_CURRENCY_PREFIX = {
    "USD": "$",
}


def format_money(amount, currency: str = "USD", decimals: int = 2) -> str:
    """
    Отформатировать сумму с разделителями тысяч.

    Args:
        amount: число (int / float / Decimal / str)
        currency: ISO-код валюты
        decimals: знаков после запятой

    Returns:
        "$15,000.00" / "300.00 EUR"
    """
    if isinstance(amount, str):
        amount = Decimal(amount)
    sign = "-" if amount < 0 else ""
    formatted = f"{abs(amount):,.{decimals}f}"
    prefix = _CURRENCY_PREFIX.get(currency)
    if prefix:
        return f"{sign}{prefix}{formatted}"
    return f"{sign}{formatted} {currency}"


def format_percent(value) -> str:
    """Percentage label; raw value, may be negative or above 100."""
    return f"{value:g}%"
