"""Number parsing utilities for prices, rates and quantities."""
import re
from decimal import Decimal, InvalidOperation
from typing import Union

MONEY_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

Number = Union[Decimal, int, float, str]


def parse_money(value: Number) -> Decimal:
    """
    Parse a monetary amount or percentage into a Decimal.

    Accepts Decimals, ints, floats (converted through ``str`` so 0.1 stays
    0.1) and plain strings such as ``"12.50"``.

    Raises:
        ValueError: if the value is empty, malformed or negative.
    """
    if value is None or isinstance(value, bool):
        raise ValueError('Invalid amount. Use 1234.56')

    if isinstance(value, Decimal):
        decimal_value = value
    else:
        cleaned = str(value).strip()
        if cleaned.startswith('-') and MONEY_PATTERN.match(cleaned[1:]):
            raise ValueError('The value cannot be negative')
        if not MONEY_PATTERN.match(cleaned):
            raise ValueError('Invalid amount. Use 1234.56')
        try:
            decimal_value = Decimal(cleaned)
        except (InvalidOperation, ValueError):
            raise ValueError('Invalid amount. Use 1234.56')

    if not decimal_value.is_finite():
        raise ValueError('Invalid amount. Use 1234.56')
    if decimal_value < 0:
        raise ValueError('The value cannot be negative')

    return decimal_value


def parse_quantity(value: Union[int, str]) -> int:
    """
    Parse a whole-unit quantity (stock level or cart quantity).

    Negative values are allowed here; callers decide what they mean.

    Raises:
        ValueError: if the value is not a whole number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError('Quantity must be a whole number')
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError('Quantity must be a whole number')
        return int(value)

    cleaned = str(value).strip()
    if not INTEGER_PATTERN.match(cleaned):
        raise ValueError('Quantity must be a whole number')
    return int(cleaned)
