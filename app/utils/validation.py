"""
Validation utilities
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation


def normalize_decimal_input(value: str) -> str:
    """
    Нормализовать ввод суммы: заменить запятую на точку

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Валидация денежной суммы

    Args:
        value: Строка с суммой
        max_decimal_places: Максимум знаков после запятой (по умолчанию 2)

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "Максимум 2 знака после запятой")
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Некорректная сумма"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"Максимум {max_decimal_places} знака после запятой"

    return True, None


def validate_and_normalize_amount(value: str, max_decimal_places: int = 2) -> str:
    """
    Валидировать и нормализовать сумму (raise exception при ошибке)

    Raises:
        ValueError: если валидация не прошла
    """
    is_valid, error = validate_decimal_amount(value, max_decimal_places)
    if not is_valid:
        raise ValueError(error)

    return normalize_decimal_input(value)


def parse_non_negative_amount(value, max_decimal_places: int = 2) -> Decimal:
    """str / int / Decimal -> Decimal >= 0 (raises ValueError)."""
    normalized = validate_and_normalize_amount(str(value), max_decimal_places)
    amount = Decimal(normalized)
    if amount < 0:
        raise ValueError("Сумма не может быть отрицательной")
    return amount


def parse_number(value) -> Decimal:
    """Any numeric input (key-result values, habit measurements) -> Decimal."""
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(normalize_decimal_input(str(value)))
        except (InvalidOperation, ValueError):
            raise ValueError("Некорректное число")
    # finite values only (no NaN, no Infinity)
    if not number.is_finite():
        raise ValueError("Некорректное число")
    return number


def parse_optional_date(value) -> date | None:
    """None / "" / date / "YYYY-MM-DD" -> date | None"""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValueError(f"Некорректная дата: {value}")
