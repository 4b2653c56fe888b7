"""Expense records, field validation and the persisted line format.

An :class:`Expense` is an immutable value identified solely by its
``id``.  Fresh expenses are built with :meth:`Expense.create`, which
validates every field and raises :class:`ValidationError`.  Callers
that prefer an explicit success/failure value (the Streamlit forms
loop until input is valid) use :func:`build_expense`, which returns an
:class:`ExpenseResult` instead of raising.

Expenses read back from disk go through :meth:`Expense.from_line`.
That path trusts the stored values (no future-date or minimum-length
checks) but still parses the amount and the ``YYYY-MM-DD`` date
strictly, raising :class:`ParseError` on malformed rows.
"""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .formatting import format_currency, truncate

FIELD_DELIMITER = "|"
FIELD_COUNT = 7
FILE_FORMAT = "ID|Description|Amount|Category|Date|PaymentMethod|Notes"

MIN_DESCRIPTION_LENGTH = 3
MAX_AMOUNT = 1_000_000
DEFAULT_PAYMENT_METHOD = "Cash"

# Reserved characters never written literally inside a field.
_ESCAPES: Tuple[Tuple[str, str], ...] = (
    (FIELD_DELIMITER, "⎮"),
    ("\n", "␤"),
    ("\r", "␍"),
)
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ValidationError(ValueError):
    """Raised when an expense field breaks a semantic rule."""


class ParseError(ValueError):
    """Raised when a persisted expense line is malformed."""


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def validate_description(description: Optional[str]) -> str:
    if description is None or not str(description).strip():
        raise ValidationError("Description cannot be empty")
    cleaned = str(description).strip()
    if len(cleaned) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
        )
    return cleaned


def validate_amount(amount: Any) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError(f"Amount must be a number, got {amount!r}") from None
    if not math.isfinite(value):
        raise ValidationError("Amount must be a finite number")
    if value <= 0:
        raise ValidationError("Amount must be greater than zero")
    if value > MAX_AMOUNT:
        raise ValidationError(f"Amount exceeds maximum limit ({MAX_AMOUNT:,})")
    # Two decimals, as written to disk.
    value = round(value, 2)
    if value <= 0:
        raise ValidationError("Amount must be at least 0.01")
    return value


def validate_category(category: Optional[str]) -> str:
    if category is None or not str(category).strip():
        raise ValidationError("Category cannot be empty")
    return str(category).strip()


def validate_date(value: Any, today: Optional[date] = None) -> date:
    """Return ``value`` as a :class:`date`, rejecting missing and future dates.

    ``today`` defaults to the current date; it is the last allowed day.
    """
    if value is None:
        raise ValidationError("Date cannot be empty")
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        try:
            value = _parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Date must use the YYYY-MM-DD format, got {value!r}") from None
    elif not isinstance(value, date):
        raise ValidationError(f"Unsupported date value {value!r}")
    if value > (today or date.today()):
        raise ValidationError("Date cannot be in the future")
    return value


def normalize_payment_method(payment_method: Optional[str]) -> str:
    if payment_method is None or not str(payment_method).strip():
        return DEFAULT_PAYMENT_METHOD
    return str(payment_method).strip()


def normalize_notes(notes: Optional[str]) -> str:
    return "" if notes is None else str(notes).strip()


def _parse_iso_date(text: str) -> date:
    text = text.strip()
    if not _DATE_PATTERN.match(text):
        raise ValueError(f"not a YYYY-MM-DD date: {text!r}")
    return date.fromisoformat(text)


def _escape(text: str) -> str:
    for reserved, substitute in _ESCAPES:
        text = text.replace(reserved, substitute)
    return text


def _unescape(text: str) -> str:
    for reserved, substitute in _ESCAPES:
        text = text.replace(substitute, reserved)
    return text


# ---------------------------------------------------------------------------
# Expense record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expense:
    """A single expense entry.  Equality and hashing use ``id`` only."""

    id: str
    description: str = field(compare=False)
    amount: float = field(compare=False)
    category: str = field(compare=False)
    date: date = field(compare=False)
    payment_method: str = field(default=DEFAULT_PAYMENT_METHOD, compare=False)
    notes: str = field(default="", compare=False)

    @classmethod
    def create(
        cls,
        description: Optional[str],
        amount: Any,
        category: Optional[str],
        expense_date: Any,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
        *,
        expense_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> "Expense":
        """Validate every field and build an expense.

        A new identifier is generated unless ``expense_id`` is given,
        which is how a replacement for an existing record keeps its id.

        Raises:
            ValidationError: If any field breaks its rule
        """
        return cls(
            id=expense_id or str(uuid.uuid4()),
            description=validate_description(description),
            amount=validate_amount(amount),
            category=validate_category(category),
            date=validate_date(expense_date, today=today),
            payment_method=normalize_payment_method(payment_method),
            notes=normalize_notes(notes),
        )

    def updated(self, today: Optional[date] = None, **changes: Any) -> "Expense":
        """Return a validated replacement that keeps this expense's id."""
        values = {
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "expense_date": self.date,
            "payment_method": self.payment_method,
            "notes": self.notes,
        }
        if "date" in changes:
            changes["expense_date"] = changes.pop("date")
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Unknown expense fields: {', '.join(sorted(unknown))}")
        values.update(changes)
        return Expense.create(expense_id=self.id, today=today, **values)

    # -- persisted line format ------------------------------------------

    def to_line(self) -> str:
        return FIELD_DELIMITER.join(
            [
                self.id,
                _escape(self.description),
                f"{self.amount:.2f}",
                _escape(self.category),
                self.date.isoformat(),
                _escape(self.payment_method),
                _escape(self.notes),
            ]
        )

    @classmethod
    def from_line(cls, line: Optional[str]) -> "Expense":
        """Rebuild an expense from one data line of the expense file.

        Raises:
            ParseError: If the line has the wrong shape, a non-numeric
                amount or an unparseable date
        """
        if line is None or not line.strip():
            raise ParseError("Invalid file line: line is empty")
        parts = line.rstrip("\r\n").split(FIELD_DELIMITER)
        if len(parts) != FIELD_COUNT:
            raise ParseError(
                f"Invalid file format - expected {FIELD_COUNT} fields, got {len(parts)}"
            )
        expense_id, description, amount_text, category, date_text, payment_method, notes = parts
        if not expense_id.strip():
            raise ParseError("Invalid file format - missing expense id")
        try:
            amount = float(amount_text)
        except ValueError:
            raise ParseError(f"Invalid amount format: {amount_text}") from None
        if not math.isfinite(amount):
            raise ParseError(f"Invalid amount format: {amount_text}")
        try:
            expense_date = _parse_iso_date(date_text)
        except ValueError:
            raise ParseError(f"Invalid date format: {date_text}") from None
        return cls(
            id=expense_id.strip(),
            description=_unescape(description),
            amount=amount,
            category=_unescape(category),
            date=expense_date,
            payment_method=_unescape(payment_method),
            notes=_unescape(notes),
        )

    # -- derived values -------------------------------------------------

    @property
    def year_month(self) -> str:
        return self.date.strftime("%Y-%m")

    @property
    def day_of_year(self) -> int:
        return self.date.timetuple().tm_yday

    @property
    def week_of_year(self) -> int:
        # Simplified week numbering, not ISO-8601.
        return self.day_of_year // 7 + 1

    @property
    def sort_key(self) -> Tuple[int, float]:
        return (-self.date.toordinal(), -self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "Date": self.date,
            "Description": self.description,
            "Amount": self.amount,
            "Category": self.category,
            "Payment Method": self.payment_method,
            "Notes": self.notes,
        }

    # -- display --------------------------------------------------------

    @property
    def display_string(self) -> str:
        return (
            f"{self.date.strftime('%b %d, %Y'):<12} | "
            f"{truncate(self.description, 20):<20} | "
            f"${self.amount:<10.2f} | "
            f"{self.category:<15} | "
            f"{self.payment_method}"
        )

    @property
    def detailed_info(self) -> str:
        return "\n".join(
            [
                f"ID: {self.id[:8]}...",
                f"Description: {self.description}",
                f"Amount: {format_currency(self.amount)}",
                f"Category: {self.category}",
                f"Date: {self.date.strftime('%A, %B %d, %Y')}",
                f"Payment Method: {self.payment_method}",
                f"Notes: {self.notes or 'None'}",
            ]
        )

    @property
    def compact_display(self) -> str:
        return f"${self.amount:.2f} - {self.description} ({self.category})"

    def __str__(self) -> str:
        return self.compact_display


def sort_expenses(expenses: Iterable[Expense]) -> List[Expense]:
    """Return a new list in natural order: newest first, then largest amount."""
    return sorted(expenses, key=lambda expense: expense.sort_key)


# ---------------------------------------------------------------------------
# Result-returning construction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExpenseResult:
    expense: Optional[Expense] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.expense is not None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""


def build_expense(
    description: Optional[str],
    amount: Any,
    category: Optional[str],
    expense_date: Any,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    *,
    expense_id: Optional[str] = None,
    today: Optional[date] = None,
) -> ExpenseResult:
    """Build an expense without raising on invalid input.

    Returns an :class:`ExpenseResult` holding either the expense or the
    :class:`ValidationError` describing the first failing field.
    """
    try:
        expense = Expense.create(
            description,
            amount,
            category,
            expense_date,
            payment_method,
            notes,
            expense_id=expense_id,
            today=today,
        )
    except ValidationError as exc:
        return ExpenseResult(error=exc)
    return ExpenseResult(expense=expense)
