"""Tabular views over expenses for the dashboard.

These functions turn store output (lists of :class:`Expense` and the
plain mappings returned by the aggregation methods) into pandas
objects that :mod:`visualization` and the Streamlit app can render.
They never touch files and can be unit tested in isolation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Hashable, Iterable, List, Mapping

import pandas as pd

if TYPE_CHECKING:  # pragma: no cover
    from .expense import Expense

FRAME_COLUMNS: List[str] = [
    "id",
    "Date",
    "Description",
    "Amount",
    "Category",
    "Payment Method",
    "Notes",
]

PERIOD_CODES = {"Daily": "D", "Weekly": "W", "Monthly": "M", "Yearly": "Y"}


def expenses_to_frame(expenses: Iterable["Expense"]) -> pd.DataFrame:
    """Build a DataFrame with one row per expense, preserving input order."""
    df = pd.DataFrame([expense.to_dict() for expense in expenses], columns=FRAME_COLUMNS)
    df["Date"] = pd.to_datetime(df["Date"])
    df["Amount"] = pd.to_numeric(df["Amount"]).astype(float)
    return df


def totals_to_series(totals: Mapping[Hashable, float], name: str = "Amount", sort_index: bool = False) -> pd.Series:
    """Convert a totals mapping into a Series, largest first unless ``sort_index``."""
    series = pd.Series(dict(totals), name=name, dtype=float)
    if sort_index:
        return series.sort_index()
    return series.sort_values(ascending=False)


def aggregate_by_period(df: pd.DataFrame, freq: str = "M") -> pd.DataFrame:
    """Sum the Amount column by calendar period.

    ``freq`` is a pandas period code (``"D"``, ``"W"``, ``"M"`` or
    ``"Y"``).  The result is indexed by the period start timestamp.
    """
    if "Date" not in df.columns or "Amount" not in df.columns:
        raise ValueError("DataFrame must contain 'Date' and 'Amount' columns")
    if df.empty:
        return pd.DataFrame({"Amount": pd.Series(dtype=float)}, index=pd.DatetimeIndex([], name="Period"))
    periods = pd.to_datetime(df["Date"]).dt.to_period(freq)
    grouped = df.groupby(periods)["Amount"].sum()
    grouped.index = grouped.index.to_timestamp()
    grouped.index.name = "Period"
    return grouped.to_frame(name="Amount")


def aggregate_by_category(df: pd.DataFrame) -> pd.Series:
    """Sum the Amount column for each category, largest first."""
    if "Category" not in df.columns or "Amount" not in df.columns:
        raise ValueError("DataFrame must contain 'Category' and 'Amount' columns")
    return df.groupby("Category")["Amount"].sum().sort_values(ascending=False)


def describe_amounts(df: pd.DataFrame) -> pd.DataFrame:
    """Descriptive statistics of the Amount column."""
    return df[["Amount"]].describe()


def budget_status_frame(status: Dict[str, Dict[str, float]]) -> pd.DataFrame:
    """Flatten :meth:`ExpenseStore.budget_status` output into a table."""
    columns = ["Category", "Budget", "Spent", "Remaining", "Percentage"]
    rows = [
        {
            "Category": category,
            "Budget": values["budget"],
            "Spent": values["spent"],
            "Remaining": values["remaining"],
            "Percentage": values["percentage"],
        }
        for category, values in status.items()
    ]
    return pd.DataFrame(rows, columns=columns)
