#!/usr/bin/env python3
"""Print text charts for the stored expenses, optionally exporting a CSV."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expense_tracker import charts
from expense_tracker.config import configure_logging
from expense_tracker.store import ExpenseStore

CHARTS = ('summary', 'category', 'monthly', 'weekly', 'pie', 'budgets', 'comparison')


def render(store: ExpenseStore, chart: str) -> str:
    if chart == 'summary':
        return charts.summary_box(store.statistics())
    if chart == 'category':
        return charts.category_chart(store.total_by_category())
    if chart == 'monthly':
        return charts.monthly_chart(store.total_by_month())
    if chart == 'weekly':
        return charts.weekly_chart(store.total_by_week())
    if chart == 'pie':
        return charts.pie_chart(store.total_by_category())
    if chart == 'budgets':
        return charts.budget_report(store.budget_status())
    if chart == 'comparison':
        return charts.comparison_chart(
            store.calculate_current_month_total(),
            store.calculate_last_month_total(),
        )
    raise ValueError(f"Unknown chart '{chart}'")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Show expense charts and statistics.')
    parser.add_argument('--data-dir', type=Path, default=None, help='Directory holding the expense files')
    parser.add_argument(
        '--chart',
        choices=CHARTS,
        action='append',
        help='Chart to print (repeatable). Defaults to the summary box.',
    )
    parser.add_argument('--export', type=Path, default=None, help='Also write all expenses to this CSV file')
    parser.add_argument('--log-level', default=None, help='Logging level, e.g. DEBUG')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    store = ExpenseStore(data_dir=args.data_dir)

    for chart in args.chart or ['summary']:
        print(render(store, chart))
        print()

    if args.export is not None:
        if not store.export_to_csv(args.export):
            print(store.last_error or 'Export failed.', file=sys.stderr)
            return 1
        print(f"Exported {store.count()} expenses to {args.export}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
