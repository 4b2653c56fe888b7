"""In-memory expense store with flat-file persistence.

:class:`ExpenseStore` is the single authority over expense records and
category budgets.  Every mutating call rewrites the whole expense file
after copying the previous version to a single backup file.  Reads,
filters and aggregates are computed from the in-memory list and always
return fresh collections.

The store is not safe for concurrent writers.  A wrapper that serves it
from several threads or processes must serialize the load/mutate/save
sequence itself.
"""

from __future__ import annotations

import calendar
import dataclasses
import logging
import math
import shutil
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .analytics import expenses_to_frame
from .budget_storage import BudgetStorage
from .config import (
    BACKUP_FILE,
    BACKUP_FILENAME,
    BUDGET_FILE,
    BUDGET_FILENAME,
    EXPENSE_FILE,
    EXPENSE_FILENAME,
    ensure_directory,
)
from .expense import FILE_FORMAT, Expense, ParseError, ValidationError, sort_expenses

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COMMENT_PREFIX = "#"
CSV_HEADER = "Date,Description,Amount,Category,Payment Method,Notes"
NOT_AVAILABLE = "N/A"


def _month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _csv_quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _csv_field(text: str) -> str:
    if any(ch in text for ch in (',', '"', '\n', '\r')):
        return _csv_quote(text)
    return text


class ExpenseStore:
    """Owns all expense records and the category budget mapping."""

    def __init__(
        self,
        data_dir: Optional[PathLike] = None,
        expense_file: Optional[PathLike] = None,
        backup_file: Optional[PathLike] = None,
        budget_file: Optional[PathLike] = None,
    ):
        """Create the store and load persisted data.

        Args:
            data_dir: Directory holding the default file names.  Without
                it the paths from config are used.
            expense_file: Explicit primary expense file
            backup_file: Explicit backup file
            budget_file: Explicit budget file
        """
        base = Path(data_dir) if data_dir is not None else None
        self.expense_path = self._resolve(expense_file, base, EXPENSE_FILENAME, EXPENSE_FILE)
        self.backup_path = self._resolve(backup_file, base, BACKUP_FILENAME, BACKUP_FILE)
        self.budget_path = self._resolve(budget_file, base, BUDGET_FILENAME, BUDGET_FILE)

        self._expenses: List[Expense] = []
        self._budget_storage = BudgetStorage(self.budget_path)
        self._budgets: Dict[str, float] = {}
        self.last_error: Optional[str] = None

        self._load_expenses()
        self._budgets = self._budget_storage.load()

    @staticmethod
    def _resolve(explicit: Optional[PathLike], base: Optional[Path], filename: str, default: Path) -> Path:
        if explicit is not None:
            return Path(explicit)
        if base is not None:
            return base / filename
        return default

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_expenses(self) -> None:
        if not self.expense_path.exists():
            logger.info("No expense file found at %s. Starting fresh.", self.expense_path)
            return

        loaded: List[Expense] = []
        try:
            # Binary mode splits on "\n" only; each line is decoded on its own.
            with self.expense_path.open('rb') as handle:
                for line_number, raw_line in enumerate(handle, start=1):
                    try:
                        line = raw_line.decode('utf-8').strip()
                    except UnicodeDecodeError as e:
                        logger.warning("Skipping line %d of %s: %s", line_number, self.expense_path, e)
                        continue
                    if not line or line.startswith(COMMENT_PREFIX):
                        continue
                    try:
                        loaded.append(Expense.from_line(line))
                    except ParseError as e:
                        logger.warning("Skipping line %d of %s: %s", line_number, self.expense_path, e)
        except OSError as e:
            logger.error("Error reading expense file %s: %s", self.expense_path, e)
            return

        self._expenses = loaded
        logger.info("Loaded %d expenses.", len(self._expenses))

    def _save_expenses(self) -> bool:
        try:
            ensure_directory(self.expense_path.parent)
            if self.expense_path.exists():
                ensure_directory(self.backup_path.parent)
                shutil.copyfile(self.expense_path, self.backup_path)

            with self.expense_path.open('w', encoding='utf-8', newline='\n') as handle:
                handle.write("# Expense Tracker Data File\n")
                handle.write(f"# Format: {FILE_FORMAT}\n")
                handle.write(f"# Last updated: {datetime.now():%Y-%m-%d %H:%M:%S}\n")
                for expense in self._expenses:
                    handle.write(expense.to_line())
                    handle.write("\n")
        except OSError as e:
            self.last_error = f"Error saving expenses: {e}"
            logger.error(self.last_error)
            return False

        self.last_error = None
        return True

    def _save_budgets(self) -> bool:
        try:
            self._budget_storage.save(self._budgets)
        except OSError as e:
            self.last_error = f"Error saving budgets: {e}"
            logger.error(self.last_error)
            return False

        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add(self, expense: Expense) -> bool:
        """Append ``expense`` and persist.

        Returns:
            Whether the save succeeded.  The expense stays in memory
            either way.

        Raises:
            ValueError: If ``expense`` is missing or its id is already stored
        """
        if expense is None:
            raise ValueError("Expense cannot be None")
        if self.find_by_id(expense.id) is not None:
            raise ValueError(f"An expense with id {expense.id} already exists")
        self._expenses.append(expense)
        return self._save_expenses()

    def update(self, expense_id: str, new_expense: Expense) -> bool:
        """Replace the expense with ``expense_id`` by ``new_expense``.

        The replacement always keeps ``expense_id``.  Returns ``False``
        without touching the store when no expense matches.
        """
        for index, current in enumerate(self._expenses):
            if current.id == expense_id:
                if new_expense.id != expense_id:
                    new_expense = dataclasses.replace(new_expense, id=expense_id)
                self._expenses[index] = new_expense
                return self._save_expenses()
        return False

    def delete(self, expense_id: str) -> bool:
        """Remove every expense with ``expense_id``; returns whether any was removed."""
        remaining = [expense for expense in self._expenses if expense.id != expense_id]
        if len(remaining) == len(self._expenses):
            return False
        self._expenses = remaining
        self._save_expenses()
        return True

    def find_by_id(self, expense_id: str) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def count(self) -> int:
        return len(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all(self) -> List[Expense]:
        return sort_expenses(self._expenses)

    def get_by_date_range(self, start: date, end: date) -> List[Expense]:
        """Expenses dated from ``start`` to ``end``, both inclusive."""
        return sort_expenses(e for e in self._expenses if start <= e.date <= end)

    def get_by_category(self, category: str) -> List[Expense]:
        wanted = (category or "").lower()
        return sort_expenses(e for e in self._expenses if e.category.lower() == wanted)

    def get_current_month(self, today: Optional[date] = None) -> List[Expense]:
        today = today or date.today()
        return self.get_by_date_range(*_month_bounds(today.year, today.month))

    def get_last_month(self, today: Optional[date] = None) -> List[Expense]:
        today = today or date.today()
        last_of_previous = today.replace(day=1) - timedelta(days=1)
        return self.get_by_date_range(*_month_bounds(last_of_previous.year, last_of_previous.month))

    def get_current_week(self, today: Optional[date] = None) -> List[Expense]:
        """Expenses from the most recent Monday through ``today``."""
        today = today or date.today()
        monday = today - timedelta(days=today.weekday())
        return self.get_by_date_range(monday, today)

    def search(self, query: Optional[str]) -> List[Expense]:
        """Case-insensitive substring search over description, category and notes."""
        if query is None or not query.strip():
            return self.get_all()
        needle = query.lower()
        return sort_expenses(
            e
            for e in self._expenses
            if needle in e.description.lower()
            or needle in e.category.lower()
            or needle in e.notes.lower()
        )

    def to_frame(self) -> pd.DataFrame:
        """All expenses in natural order as a DataFrame."""
        return expenses_to_frame(self.get_all())

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def total_by_category(self) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        for expense in self._expenses:
            totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
        return totals

    def total_by_month(self) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        for expense in self._expenses:
            month = expense.year_month
            totals[month] = totals.get(month, 0.0) + expense.amount
        return totals

    def total_by_week(self) -> Dict[int, float]:
        totals: Dict[int, float] = {}
        for expense in self._expenses:
            week = expense.week_of_year
            totals[week] = totals.get(week, 0.0) + expense.amount
        return totals

    def total_by_day(self) -> Dict[date, float]:
        totals: Dict[date, float] = {}
        for expense in self._expenses:
            totals[expense.date] = totals.get(expense.date, 0.0) + expense.amount
        return totals

    def calculate_total(self) -> float:
        return sum(expense.amount for expense in self._expenses)

    def calculate_current_month_total(self, today: Optional[date] = None) -> float:
        return sum(expense.amount for expense in self.get_current_month(today))

    def calculate_last_month_total(self, today: Optional[date] = None) -> float:
        return sum(expense.amount for expense in self.get_last_month(today))

    def statistics(self) -> Dict[str, Any]:
        """Summary figures over every stored expense.

        Ties for the top category go to the alphabetically first name
        and ties for the most expensive day go to the earliest date.
        """
        if not self._expenses:
            return {
                'total': 0.0,
                'count': 0,
                'average': 0.0,
                'max': 0.0,
                'min': 0.0,
                'top_category': NOT_AVAILABLE,
                'max_day': NOT_AVAILABLE,
            }

        amounts = [expense.amount for expense in self._expenses]
        total = self.calculate_total()
        count = len(self._expenses)

        category_totals = self.total_by_category()
        top_category = max(sorted(category_totals), key=lambda name: category_totals[name])

        daily_totals = self.total_by_day()
        max_day = max(sorted(daily_totals), key=lambda day: daily_totals[day])

        return {
            'total': total,
            'count': count,
            'average': total / count,
            'max': max(amounts),
            'min': min(amounts),
            'top_category': top_category,
            'max_day': max_day.isoformat(),
        }

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def set_budget(self, category: str, amount: float) -> bool:
        """Set the budget limit for ``category`` and persist all budgets.

        Raises:
            ValidationError: If the category is blank or the amount is
                negative or not a finite number
        """
        if category is None or not str(category).strip():
            raise ValidationError("Budget category cannot be empty")
        try:
            value = float(amount)
        except (TypeError, ValueError):
            raise ValidationError(f"Budget amount must be a number, got {amount!r}") from None
        if not math.isfinite(value):
            raise ValidationError("Budget amount must be a finite number")
        if value < 0:
            raise ValidationError("Budget amount cannot be negative")
        self._budgets[str(category).strip()] = value
        return self._save_budgets()

    def get_budget(self, category: str) -> float:
        """Budget limit for ``category``; 0.0 when none is set."""
        return self._budgets.get(category, 0.0)

    def get_all_budgets(self) -> Dict[str, float]:
        return dict(self._budgets)

    def remove_budget(self, category: str) -> bool:
        """Drop the budget entry for ``category``; returns whether one existed."""
        if category not in self._budgets:
            return False
        del self._budgets[category]
        self._save_budgets()
        return True

    def is_over_budget(self, category: str) -> bool:
        budget = self.get_budget(category)
        if budget == 0:
            return False
        spent = self.total_by_category().get(category, 0.0)
        return spent > budget

    def budget_status(self) -> Dict[str, Dict[str, float]]:
        """Budget, spend, remaining and percentage used for each budgeted category."""
        status: Dict[str, Dict[str, float]] = {}
        category_totals = self.total_by_category()

        for category in sorted(self._budgets):
            budget = self._budgets[category]
            spent = category_totals.get(category, 0.0)
            status[category] = {
                'budget': budget,
                'spent': spent,
                'remaining': budget - spent,
                'percentage': (spent / budget) * 100 if budget > 0 else 0.0,
            }
        return status

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_to_csv(self, path: PathLike) -> bool:
        """Write every expense, newest first, to a CSV file at ``path``."""
        target = Path(path)
        try:
            ensure_directory(target.parent)
            with target.open('w', encoding='utf-8', newline='') as handle:
                handle.write(CSV_HEADER + "\n")
                for expense in self.get_all():
                    row = [
                        expense.date.isoformat(),
                        _csv_quote(expense.description),
                        f"{expense.amount:.2f}",
                        _csv_field(expense.category),
                        _csv_field(expense.payment_method),
                        _csv_quote(expense.notes),
                    ]
                    handle.write(",".join(row) + "\n")
        except OSError as e:
            self.last_error = f"Error exporting to CSV: {e}"
            logger.error(self.last_error)
            return False

        logger.info("Exported %d expenses to %s", len(self._expenses), target)
        return True
