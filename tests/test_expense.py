"""Unit tests for expense_tracker.expense."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from expense_tracker.expense import (
    DEFAULT_PAYMENT_METHOD,
    Expense,
    ParseError,
    ValidationError,
    build_expense,
    sort_expenses,
)


def _expense(description='Lunch', amount=12.5, category='Food', when=date(2024, 3, 1), **kwargs):
    return Expense.create(description, amount, category, when, **kwargs)


def test_create_generates_unique_ids_and_trims_fields():
    first = _expense(description='  Groceries  ', category=' Food ')
    second = _expense()

    assert first.id != second.id
    assert first.description == 'Groceries'
    assert first.category == 'Food'


def test_payment_method_and_notes_defaults():
    blank = _expense(payment_method='   ', notes=None)
    missing = _expense()

    assert blank.payment_method == DEFAULT_PAYMENT_METHOD
    assert missing.payment_method == 'Cash'
    assert blank.notes == ''


@pytest.mark.parametrize('description', ['', '   ', 'ab', '  ab  ', None])
def test_short_or_empty_description_is_rejected(description):
    with pytest.raises(ValidationError):
        _expense(description=description)


def test_three_character_description_is_accepted():
    assert _expense(description=' Tea ').description == 'Tea'


@pytest.mark.parametrize('amount', [0, -1, -0.01, 1_000_000.01, 2_000_000, float('nan'), float('inf'), 'abc', None])
def test_invalid_amounts_are_rejected(amount):
    with pytest.raises(ValidationError):
        _expense(amount=amount)


@pytest.mark.parametrize('amount', [0.01, 1, 999_999.99, 1_000_000])
def test_amount_boundaries_are_accepted(amount):
    assert _expense(amount=amount).amount == pytest.approx(amount)


def test_future_date_is_rejected_but_today_is_allowed():
    today = date.today()
    assert _expense(when=today).date == today
    with pytest.raises(ValidationError, match='future'):
        _expense(when=today + timedelta(days=1))


def test_today_can_be_injected():
    with pytest.raises(ValidationError):
        _expense(when=date(2024, 3, 2), today=date(2024, 3, 1))
    assert _expense(when=date(2024, 3, 1), today=date(2024, 3, 1)).date == date(2024, 3, 1)


def test_missing_date_and_category_are_rejected():
    with pytest.raises(ValidationError):
        _expense(when=None)
    with pytest.raises(ValidationError):
        _expense(category='  ')


def test_iso_date_string_is_accepted_for_new_expenses():
    assert _expense(when='2024-02-29').date == date(2024, 2, 29)
    with pytest.raises(ValidationError):
        _expense(when='29/02/2024')


def test_validation_error_is_distinct_from_parse_error():
    assert issubclass(ValidationError, ValueError)
    assert issubclass(ParseError, ValueError)
    assert not issubclass(ParseError, ValidationError)
    assert not issubclass(ValidationError, ParseError)


def test_line_round_trip_preserves_all_fields():
    original = _expense(
        description='Dinner | drinks',
        amount=19.99,
        category='Entertainment',
        when=date(2023, 12, 31),
        payment_method='Credit Card',
        notes='split 3 ways | tip included\nsecond line',
    )

    line = original.to_line()
    parsed = Expense.from_line(line)

    assert line.count('|') == 6
    assert '\n' not in line
    assert parsed.id == original.id
    assert parsed.description == original.description
    assert parsed.amount == round(original.amount, 2)
    assert parsed.category == original.category
    assert parsed.date == original.date
    assert parsed.payment_method == original.payment_method
    assert parsed.notes == original.notes


def test_amount_is_written_with_two_decimals():
    line = _expense(amount=900).to_line()
    assert line.split('|')[2] == '900.00'
    assert line.split('|')[4] == '2024-03-01'


def test_from_line_trusts_stored_values():
    # Stored rows are not re-validated for length or future dates.
    parsed = Expense.from_line('abc-123|ab|5.00|Food|2999-01-01|Cash|')
    assert parsed.description == 'ab'
    assert parsed.date == date(2999, 1, 1)
    assert parsed.notes == ''


@pytest.mark.parametrize(
    'line',
    [
        '',
        '   ',
        'id|Lunch|12.50|Food|2024-03-01|Cash',
        'id|Lunch|12.50|Food|2024-03-01|Cash|notes|extra',
        'id|Lunch|twelve|Food|2024-03-01|Cash|',
        'id|Lunch|nan|Food|2024-03-01|Cash|',
        'id|Lunch|12.50|Food|2024/03/01|Cash|',
        'id|Lunch|12.50|Food|2024-3-1|Cash|',
        'id|Lunch|12.50|Food|2024-02-30|Cash|',
        '|Lunch|12.50|Food|2024-03-01|Cash|',
    ],
)
def test_malformed_lines_raise_parse_error(line):
    with pytest.raises(ParseError):
        Expense.from_line(line)


def test_equality_and_hash_use_id_only():
    original = _expense()
    changed = original.updated(description='Brunch', amount=30)

    assert changed == original
    assert hash(changed) == hash(original)
    assert changed.description == 'Brunch'
    assert _expense() != original


def test_updated_validates_changes():
    original = _expense()
    with pytest.raises(ValidationError):
        original.updated(amount=-5)
    with pytest.raises(TypeError):
        original.updated(colour='red')
    assert original.updated(date=date(2024, 1, 1)).date == date(2024, 1, 1)


def test_natural_order_is_date_then_amount_descending():
    old_big = _expense(amount=500, when=date(2024, 1, 1))
    new_small = _expense(amount=5, when=date(2024, 2, 1))
    new_big = _expense(amount=50, when=date(2024, 2, 1))

    assert sort_expenses([old_big, new_small, new_big]) == [new_big, new_small, old_big]


@pytest.mark.parametrize(
    'when, week',
    [
        (date(2024, 1, 1), 1),
        (date(2024, 1, 6), 1),
        (date(2024, 1, 7), 2),
        (date(2024, 1, 13), 2),
        (date(2024, 1, 14), 3),
        (date(2023, 12, 31), 53),
    ],
)
def test_week_of_year_uses_day_of_year_formula(when, week):
    assert _expense(when=when).week_of_year == week


def test_year_month_key():
    assert _expense(when=date(2024, 3, 9)).year_month == '2024-03'


def test_display_helpers():
    expense = _expense(description='A very long description for lunch', amount=12.5)

    assert expense.compact_display == '$12.50 - A very long description for lunch (Food)'
    assert str(expense) == expense.compact_display
    assert 'A very long descr...' in expense.display_string
    assert expense.detailed_info.startswith(f'ID: {expense.id[:8]}...')
    assert 'Notes: None' in expense.detailed_info
    assert 'Friday, March 01, 2024' in expense.detailed_info


def test_build_expense_returns_result_instead_of_raising():
    bad = build_expense('ab', 10, 'Food', date(2024, 3, 1))
    good = build_expense('Taxi', 30, 'Transport', date(2024, 3, 1), expense_id='fixed-id')

    assert not bad.ok
    assert bad.expense is None
    assert isinstance(bad.error, ValidationError)
    assert 'at least 3 characters' in bad.message
    assert good.ok
    assert good.expense.id == 'fixed-id'
    assert good.message == ''


def test_carriage_return_survives_line_round_trip():
    original = _expense(description='Tea\rand cake', notes='first\rsecond\r\nthird')

    line = original.to_line()
    parsed = Expense.from_line(line)

    assert '\r' not in line
    assert '\n' not in line
    assert parsed.description == 'Tea\rand cake'
    assert parsed.notes == 'first\rsecond\r\nthird'


@pytest.mark.parametrize('amount, stored', [(10.005, 10.0), (10.006, 10.01), (19.999, 20.0), (0.014, 0.01)])
def test_amount_is_rounded_to_stored_precision(amount, stored):
    expense = _expense(amount=amount)

    assert expense.amount == stored
    assert Expense.from_line(expense.to_line()).amount == expense.amount


def test_amount_rounding_to_zero_is_rejected():
    with pytest.raises(ValidationError):
        _expense(amount=0.004)
