"""Helpers for monetary values."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number or numeric string to ``Decimal`` without float noise.

    Floats are converted through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a monetary value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError):
            raise ValueError(f"Not a monetary value: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a monetary value: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Serialize an amount for JSON payloads (always two decimals)."""
    return str(round_money(value))
