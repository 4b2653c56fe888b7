"""Plotly visualisation helpers for the expense tracker.

Each function accepts a pandas object produced by :mod:`analytics`
and returns a ``plotly.graph_objects.Figure`` that Streamlit renders
via ``st.plotly_chart``.  Empty input yields an empty figure titled
"No data to display" rather than an error.
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_trend_chart(aggregated: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Generate a bar chart of spending per period.

    Parameters
    ----------
    aggregated : pandas.DataFrame
        Output of :func:`analytics.aggregate_by_period`: indexed by
        period with a single ``Amount`` column.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart of totals over time.
    """
    if aggregated.empty:
        return _empty_figure()
    df = aggregated.reset_index()
    df.columns = ["Period", "Amount"]
    fig = px.bar(df, x="Period", y="Amount")
    fig.update_layout(
        title=title or "Spending over time",
        xaxis_title="Period",
        yaxis_title="Amount",
    )
    return fig


def create_cumulative_sum_chart(aggregated: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Create a cumulative spending line chart from an aggregated time-series."""
    if aggregated.empty:
        return _empty_figure()
    cumulative = aggregated.cumsum().reset_index()
    cumulative.columns = ["Period", "Amount"]
    fig = px.line(cumulative, x="Period", y="Amount")
    fig.update_layout(
        title=title or "Cumulative spending",
        xaxis_title="Period",
        yaxis_title="Cumulative amount",
    )
    return fig


def create_category_bar_chart(series: pd.Series, title: str | None = None) -> go.Figure:
    """Generate a bar chart of totals per category.

    Parameters
    ----------
    series : pandas.Series
        Series indexed by category with summed amounts.
    title : str, optional
        Title for the chart.
    """
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Category", "Amount"]
    fig = px.bar(df, x="Category", y="Amount")
    fig.update_layout(
        title=title or "Expenses by category",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig


def create_category_pie_chart(series: pd.Series, title: str | None = None) -> go.Figure:
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Category", "Amount"]
    fig = px.pie(df, names="Category", values="Amount")
    fig.update_layout(title=title or "Expense distribution")
    return fig


def create_budget_chart(status_df: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of budget against actual spend per category.

    Parameters
    ----------
    status_df : pandas.DataFrame
        Output of :func:`analytics.budget_status_frame`.
    title : str, optional
        Chart title.
    """
    if status_df.empty:
        return _empty_figure("No budgets set")
    long_df = status_df.melt(
        id_vars="Category",
        value_vars=["Budget", "Spent"],
        var_name="Measure",
        value_name="Amount",
    )
    fig = px.bar(long_df, x="Category", y="Amount", color="Measure", barmode="group")
    fig.update_layout(
        title=title or "Budget vs. spending",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig
