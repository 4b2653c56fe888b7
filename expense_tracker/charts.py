"""Text-based charts for expense summaries.

Each function takes the plain mappings returned by
:class:`~expense_tracker.store.ExpenseStore` and returns a printable
string: a boxed title followed by one ``█`` bar per row, scaled so the
largest value spans :data:`MAX_BAR_LENGTH` cells.  The Streamlit app
shows them in code blocks and ``scripts/expense_report.py`` prints them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from . import categories
from .formatting import format_currency, format_month

BLOCK_FULL = "█"
MAX_BAR_LENGTH = 50
CATEGORY_WIDTH = 15
BOX_WIDTH = 70


def _header(title: str) -> str:
    return (
        "╔" + "═" * BOX_WIDTH + "╗\n"
        + "║" + title.center(BOX_WIDTH) + "║\n"
        + "╚" + "═" * BOX_WIDTH + "╝\n\n"
    )


def _bar(amount: float, scale: float) -> str:
    if scale <= 0:
        return ""
    return BLOCK_FULL * max(0, int((amount / scale) * MAX_BAR_LENGTH))


def _category_label(category: str) -> str:
    icon = categories.resolve(category).icon
    return f"{icon} {category}".ljust(CATEGORY_WIDTH)


def _largest_first(totals: Mapping[str, float]) -> List[tuple]:
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def category_chart(totals: Mapping[str, float]) -> str:
    """Horizontal bars per category, largest first."""
    if not totals:
        return "No data available for chart."

    scale = max(totals.values())
    lines = [
        f"{_category_label(category)} | {_bar(amount, scale)} {format_currency(amount)}"
        for category, amount in _largest_first(totals)
    ]
    return _header("EXPENSES BY CATEGORY") + "\n".join(lines) + "\n"


def monthly_chart(totals: Mapping[str, float]) -> str:
    """Horizontal bars per ``YYYY-MM`` key in chronological order."""
    if not totals:
        return "No data available for monthly chart."

    scale = max(totals.values())
    lines = [
        f"{format_month(month):<12} | {_bar(amount, scale)} {format_currency(amount)}"
        for month, amount in sorted(totals.items())
    ]
    return _header("MONTHLY EXPENSE TREND") + "\n".join(lines) + "\n"


def weekly_chart(totals: Mapping[int, float]) -> str:
    if not totals:
        return "No data available for weekly chart."

    scale = max(totals.values())
    lines = [
        f"{'Week ' + str(week):<12} | {_bar(amount, scale)} {format_currency(amount)}"
        for week, amount in sorted(totals.items())
    ]
    return _header("WEEKLY EXPENSE TREND") + "\n".join(lines) + "\n"


def pie_chart(totals: Mapping[str, float]) -> str:
    """Share of the grand total per category, drawn as percentage bars."""
    if not totals:
        return "No data available for pie chart."

    total = sum(totals.values())
    lines = []
    for category, amount in _largest_first(totals):
        percentage = (amount / total) * 100 if total > 0 else 0.0
        bar = BLOCK_FULL * max(0, int((percentage / 100.0) * MAX_BAR_LENGTH))
        lines.append(
            f"{_category_label(category)} | {bar} {percentage:5.1f}% ({format_currency(amount)})"
        )
    return (
        _header("EXPENSE DISTRIBUTION (%)")
        + "\n".join(lines)
        + f"\n\nTotal: {format_currency(total)}"
    )


def summary_box(stats: Dict[str, Any]) -> str:
    """Render :meth:`ExpenseStore.statistics` output."""
    rows = [
        ("Total Expenses:", format_currency(stats.get('total', 0.0))),
        ("Number of Entries:", str(stats.get('count', 0))),
        ("Average Expense:", format_currency(stats.get('average', 0.0))),
        ("Highest Expense:", format_currency(stats.get('max', 0.0))),
        ("Lowest Expense:", format_currency(stats.get('min', 0.0))),
        ("Most Used Category:", str(stats.get('top_category', 'N/A'))),
        ("Most Expensive Day:", str(stats.get('max_day', 'N/A'))),
    ]
    body = "\n".join(f"  {label:<23}{value}" for label, value in rows)
    return _header("EXPENSE SUMMARY") + body + "\n"


def budget_report(status: Mapping[str, Mapping[str, float]]) -> str:
    """Render :meth:`ExpenseStore.budget_status` output, one block per category."""
    if not status:
        return "No budgets set yet."

    blocks = []
    for category, details in status.items():
        marker = "✓" if details['remaining'] >= 0 else "⚠️"
        icon = categories.resolve(category).icon
        blocks.append(
            f"{marker} {icon} {category}\n"
            f"   Budget:    {format_currency(details['budget'])}\n"
            f"   Spent:     {format_currency(details['spent'])} ({details['percentage']:.1f}%)\n"
            f"   Remaining: {format_currency(details['remaining'])}\n"
        )
    return _header("BUDGET STATUS") + "\n".join(blocks)


def comparison_chart(this_month: float, last_month: float) -> str:
    """This month against last month, with the change between them."""
    scale = max(this_month, last_month)
    lines = [
        f"{'This Month':<12} | {_bar(this_month, scale)} {format_currency(this_month)}",
        f"{'Last Month':<12} | {_bar(last_month, scale)} {format_currency(last_month)}",
        "",
    ]

    difference = this_month - last_month
    percent_change = (difference / last_month) * 100 if last_month > 0 else 0.0
    if difference > 0:
        lines.append(f"↑ Increase: {format_currency(difference)} ({percent_change:.1f}%)")
    elif difference < 0:
        lines.append(f"↓ Decrease: {format_currency(abs(difference))} ({abs(percent_change):.1f}%)")
    else:
        lines.append("→ No change")

    return _header("MONTH-TO-MONTH COMPARISON") + "\n".join(lines) + "\n"
