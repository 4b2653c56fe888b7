"""Streamlit app for the expense tracker.

The app is a thin shell over :class:`ExpenseStore`: every page issues
store queries or commands and renders what comes back, either as
tables, Plotly figures or the text charts from :mod:`charts`.  The app
never reads or writes the data files itself.

To run the app from the command line::

    streamlit run expense_tracker/app.py

or use ``run_expense_tracker.py`` in the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import List, Optional

import streamlit as st

# Support both package execution and ``streamlit run expense_tracker/app.py``.
if __package__:
    from . import analytics
    from . import categories
    from . import charts
    from . import visualization as viz
    from .config import EXPORTS_DIR, configure_logging, ensure_data_directories
    from .expense import Expense, ValidationError, build_expense
    from .formatting import format_currency
    from .store import ExpenseStore
else:
    PARENT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from expense_tracker import analytics  # type: ignore
    from expense_tracker import categories  # type: ignore
    from expense_tracker import charts  # type: ignore
    from expense_tracker import visualization as viz  # type: ignore
    from expense_tracker.config import EXPORTS_DIR, configure_logging, ensure_data_directories  # type: ignore
    from expense_tracker.expense import Expense, ValidationError, build_expense  # type: ignore
    from expense_tracker.formatting import format_currency  # type: ignore
    from expense_tracker.store import ExpenseStore  # type: ignore

PAYMENT_METHODS = ["Cash", "Credit Card", "Debit Card", "Mobile Payment", "Bank Transfer", "Other"]

PAGES = [
    "➕ Add Expense",
    "📋 All Expenses",
    "📁 By Category",
    "✏️ Update Expense",
    "🗑️ Delete Expense",
    "🔍 Search",
    "📊 Charts",
    "📈 Summary",
    "💵 Budgets",
    "💾 Export",
]


def get_store() -> ExpenseStore:
    """Return the session's store, creating it on first use."""
    if "expense_store" not in st.session_state:
        st.session_state.expense_store = ExpenseStore()
    return st.session_state.expense_store


def _report_save(saved: bool, store: ExpenseStore, success_message: str) -> None:
    if saved:
        st.success(success_message)
    else:
        st.error(
            f"⚠️ {store.last_error or 'Saving failed.'} "
            "The change is kept in memory but is not on disk yet."
        )


def _category_index(category: str) -> int:
    names = categories.all_names()
    resolved = categories.resolve(category).name
    return names.index(resolved)


def _payment_index(payment_method: str) -> int:
    return PAYMENT_METHODS.index(payment_method) if payment_method in PAYMENT_METHODS else 0


def _expense_table(expenses: List[Expense]) -> None:
    if not expenses:
        st.info("No expenses recorded yet.")
        return
    df = analytics.expenses_to_frame(expenses).drop(columns=["id"])
    df["Date"] = df["Date"].dt.date
    st.dataframe(df, use_container_width=True, hide_index=True)


def _select_expense(expenses: List[Expense], label: str, key: str) -> Optional[Expense]:
    options = {f"{i + 1}. {expense.compact_display}": expense for i, expense in enumerate(expenses)}
    choice = st.selectbox(label, options=list(options.keys()), key=key)
    return options.get(choice)


def _expense_form(form_key: str, existing: Optional[Expense] = None) -> Optional[dict]:
    """Render the expense fields; returns the raw input once submitted."""
    today = date.today()
    with st.form(form_key):
        description = st.text_input("Description", value=existing.description if existing else "")
        amount = st.number_input(
            "Amount ($)",
            min_value=0.0,
            value=float(existing.amount) if existing else 0.0,
            step=0.01,
            format="%.2f",
        )
        category_label = st.selectbox(
            "Category",
            options=categories.all_display_names(),
            index=_category_index(existing.category) if existing else 0,
        )
        expense_date = st.date_input(
            "Date",
            value=existing.date if existing else today,
            max_value=today,
        )
        payment_method = st.selectbox(
            "Payment Method",
            options=PAYMENT_METHODS,
            index=_payment_index(existing.payment_method) if existing else 0,
        )
        notes = st.text_area("Notes (optional)", value=existing.notes if existing else "")
        submitted = st.form_submit_button("Save")

    if not submitted:
        return None
    return {
        "description": description,
        "amount": amount,
        "category": categories.strip_icon_to_name(category_label),
        "expense_date": expense_date,
        "payment_method": payment_method,
        "notes": notes,
    }


def render_add(store: ExpenseStore) -> None:
    st.header("➕ Add New Expense")
    values = _expense_form("add_expense")
    if values is None:
        return

    result = build_expense(**values)
    if not result.ok:
        st.error(f"Validation error: {result.message}. Please correct and try again.")
        return

    _report_save(store.add(result.expense), store, "✓ Expense added successfully!")
    st.code(result.expense.detailed_info, language=None)

    category = result.expense.category
    if store.is_over_budget(category):
        spent = store.total_by_category().get(category, 0.0)
        st.warning(
            f"⚠️ Over budget! {category} budget: {format_currency(store.get_budget(category))}, "
            f"spent: {format_currency(spent)}"
        )


def render_all(store: ExpenseStore) -> None:
    expenses = store.get_all()
    st.header(f"📋 All Expenses ({len(expenses)})")
    _expense_table(expenses)
    if expenses:
        selected = _select_expense(expenses, "Show details for", key="details_select")
        if selected is not None:
            st.code(selected.detailed_info, language=None)


def render_by_category(store: ExpenseStore) -> None:
    st.header("📁 Expenses by Category")
    totals = store.total_by_category()
    if not totals:
        st.info("No expenses recorded yet.")
        return

    labels = {
        f"{categories.resolve(name).icon} {name} ({format_currency(total)})": name
        for name, total in sorted(totals.items())
    }
    choice = st.selectbox("Category", options=list(labels.keys()))
    expenses = store.get_by_category(labels[choice])
    st.metric("Total", format_currency(sum(e.amount for e in expenses)))
    _expense_table(expenses)


def render_update(store: ExpenseStore) -> None:
    st.header("✏️ Update Expense")
    expenses = store.get_all()
    if not expenses:
        st.info("No expenses to update.")
        return

    selected = _select_expense(expenses, "Expense to update", key="update_select")
    if selected is None:
        return
    values = _expense_form(f"update_{selected.id}", existing=selected)
    if values is None:
        return

    result = build_expense(**values, expense_id=selected.id)
    if not result.ok:
        st.error(f"Validation error: {result.message}. Please correct and try again.")
        return
    _report_save(store.update(selected.id, result.expense), store, "✓ Expense updated successfully!")


def render_delete(store: ExpenseStore) -> None:
    st.header("🗑️ Delete Expense")
    expenses = store.get_all()
    if not expenses:
        st.info("No expenses to delete.")
        return

    selected = _select_expense(expenses, "Expense to delete", key="delete_select")
    if selected is None:
        return
    st.code(selected.detailed_info, language=None)
    confirmed = st.checkbox("I want to delete this expense", key=f"confirm_{selected.id}")
    if st.button("Delete", type="primary", disabled=not confirmed):
        if store.delete(selected.id):
            _report_save(store.last_error is None, store, "✓ Expense deleted successfully!")
        else:
            st.warning("That expense no longer exists.")


def render_search(store: ExpenseStore) -> None:
    st.header("🔍 Search Expenses")
    query = st.text_input("Search term (description, category, or notes)")
    if not query.strip():
        return
    results = store.search(query)
    if not results:
        st.info(f'No expenses found matching: "{query}"')
        return
    st.caption(f"Found {len(results)} match(es)")
    _expense_table(results)


def render_charts(store: ExpenseStore) -> None:
    st.header("📊 Charts")
    category_totals = store.total_by_category()
    chart_tab, text_tab = st.tabs(["Interactive", "Text"])

    with chart_tab:
        series = analytics.totals_to_series(category_totals)
        chart_type = st.radio("Category chart", options=["Bar", "Pie"], horizontal=True)
        if chart_type == "Bar":
            st.plotly_chart(viz.create_category_bar_chart(series), use_container_width=True)
        else:
            st.plotly_chart(viz.create_category_pie_chart(series), use_container_width=True)

        freq_label = st.selectbox("Trend period", options=list(analytics.PERIOD_CODES.keys()), index=2)
        aggregated = analytics.aggregate_by_period(store.to_frame(), analytics.PERIOD_CODES[freq_label])
        st.plotly_chart(viz.create_trend_chart(aggregated), use_container_width=True)
        if st.checkbox("Show cumulative spending"):
            st.plotly_chart(viz.create_cumulative_sum_chart(aggregated), use_container_width=True)

    with text_tab:
        st.code(charts.category_chart(category_totals), language=None)
        st.code(charts.monthly_chart(store.total_by_month()), language=None)
        st.code(charts.pie_chart(category_totals), language=None)
        st.code(charts.weekly_chart(store.total_by_week()), language=None)


def render_summary(store: ExpenseStore) -> None:
    st.header("📈 Summary")
    stats = store.statistics()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total", format_currency(stats['total']))
    col2.metric("Entries", stats['count'])
    col3.metric("Average", format_currency(stats['average']))
    st.code(charts.summary_box(stats), language=None)
    st.code(
        charts.comparison_chart(store.calculate_current_month_total(), store.calculate_last_month_total()),
        language=None,
    )
    if stats['count']:
        st.dataframe(analytics.describe_amounts(store.to_frame()))


def render_budgets(store: ExpenseStore) -> None:
    st.header("💵 Budgets")
    with st.form("set_budget"):
        category_label = st.selectbox("Category", options=categories.all_display_names())
        amount = st.number_input("Budget Amount ($)", min_value=0.0, step=10.0, format="%.2f")
        submitted = st.form_submit_button("Set Budget")

    if submitted:
        category = categories.strip_icon_to_name(category_label)
        try:
            saved = store.set_budget(category, amount)
        except ValidationError as exc:
            st.error(str(exc))
        else:
            _report_save(saved, store, f"✓ Budget set: {category} {format_currency(amount)}")

    status = store.budget_status()
    if not status:
        st.info("No budgets set yet.")
        return

    status_df = analytics.budget_status_frame(status)
    st.plotly_chart(viz.create_budget_chart(status_df), use_container_width=True)
    st.dataframe(status_df, use_container_width=True, hide_index=True)
    st.code(charts.budget_report(status), language=None)

    to_remove = st.selectbox("Remove budget", options=["(none)"] + list(status.keys()))
    if to_remove != "(none)" and st.button("Remove"):
        if store.remove_budget(to_remove):
            _report_save(store.last_error is None, store, f"✓ Budget removed for {to_remove}")


def render_export(store: ExpenseStore) -> None:
    st.header("💾 Export Data")
    st.caption(f"Expenses are saved automatically to {store.expense_path}")
    target = st.text_input("CSV file", value=str(EXPORTS_DIR / "expenses_export.csv"))
    if st.button("Export to CSV"):
        if store.export_to_csv(target):
            st.success(f"✓ Data exported successfully to {target}")
        else:
            st.error(store.last_error or "Export failed.")


RENDERERS = {
    PAGES[0]: render_add,
    PAGES[1]: render_all,
    PAGES[2]: render_by_category,
    PAGES[3]: render_update,
    PAGES[4]: render_delete,
    PAGES[5]: render_search,
    PAGES[6]: render_charts,
    PAGES[7]: render_summary,
    PAGES[8]: render_budgets,
    PAGES[9]: render_export,
}


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    ensure_data_directories()
    st.set_page_config(page_title="Expense Tracker", page_icon="💰", layout="wide")
    store = get_store()

    st.sidebar.title("💰 Expense Tracker")
    page = st.sidebar.radio("Menu", options=PAGES)
    st.sidebar.metric("Total Expenses", store.count())
    st.sidebar.metric("This Month", format_currency(store.calculate_current_month_total()))

    RENDERERS[page](store)


if __name__ == "__main__":  # pragma: no cover
    main()
