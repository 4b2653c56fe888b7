"""Formatting utilities for currency, month labels and text display."""

from __future__ import annotations

from typing import Union

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with proper formatting.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{amount:,.2f}"
    return f"${formatted}" if include_sign else formatted


def format_month(year_month: str) -> str:
    """Turn a ``YYYY-MM`` key into a short label such as ``Oct 2026``.

    Keys that cannot be parsed are returned unchanged.
    """
    try:
        year_text, month_text = year_month.split("-")
        year, month = int(year_text), int(month_text)
    except ValueError:
        return year_month
    if not 1 <= month <= 12:
        return year_month
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[: length - 3] + "..."
