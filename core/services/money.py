"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

Number = Union[str, int, float, Decimal]

# Catalog prices are whole units
INTEGER_PRECISION = Decimal("1")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Returns Decimal("0") for None or values that cannot be parsed.
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Going through str keeps 0.1 as 0.1
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_money(value: Number) -> Decimal:
    """
    Strict counterpart of to_decimal for persisted amounts.

    Raises ValueError for None, unparseable, non-finite or negative values.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"invalid amount: {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"invalid amount: {value!r}")
    return amount


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON responses.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def total(values: Iterable[Number]) -> Decimal:
    """Sum monetary values, Decimal("0") for an empty iterable."""
    result = Decimal("0")
    for value in values:
        result += to_decimal(value)
    return result


def format_money(value: Number, symbol: str = "₫") -> str:
    """Format an amount as a whole-unit string with thousands separators, e.g. 50.000₫."""
    rounded = to_decimal(value).quantize(INTEGER_PRECISION, rounding=ROUND_HALF_UP)
    return f"{int(rounded):,}".replace(",", ".") + symbol
