"""
Formatting helpers for receipts and reports.
"""
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Union


def money(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with a dollar sign, thousands separators and
    exactly two decimals.

    Args:
        value: Amount to format

    Returns:
        Formatted string, or "-" if the value is invalid.

    Examples:
        money(1500) -> "$1,500.00"
        money(Decimal('5')) -> "$5.00"
        money(-3.5) -> "-$3.50"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = "-" if num < 0 else ""
    return f"{sign}${abs(num):,.2f}"


def percent(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format a percentage without trailing zeros.

    Examples:
        percent(Decimal('20')) -> "20%"
        percent(Decimal('7.50')) -> "7.5%"
    """
    if value is None or value == "":
        return "-"
    try:
        num = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return "-"
    text = f"{num:f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return f"{text}%"


def receipt_datetime(value: Union[datetime, None]) -> str:
    """
    Format a sale timestamp the way it is printed on receipts.

    Examples:
        receipt_datetime(datetime(2026, 1, 12, 15, 30)) -> "Jan 12, 2026, 03:30 PM"
    """
    if value is None:
        return "-"

    if not isinstance(value, datetime):
        return "-"

    return value.strftime("%b %d, %Y, %I:%M %p")
