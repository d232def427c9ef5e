from datetime import date, datetime

import pytest

from budget_tracker.utils.currency import to_money
from budget_tracker.utils.date_helpers import (
    advance,
    coerce_date,
    first_of_next_month,
    format_display_date,
    initial_next_run,
    month_range,
    next_month,
    occurrences_between,
    parse_display_date,
    prev_month,
    split_month_key,
    validate_year_month,
)
from budget_tracker.utils.errors import ValidationError


def test_weekly_and_biweekly_step_by_days():
    assert advance(date(2025, 1, 1), "weekly") == date(2025, 1, 8)
    assert advance(date(2025, 12, 29), "biweekly") == date(2026, 1, 12)


def test_monthly_moves_to_day_of_next_month():
    assert advance(date(2025, 1, 31), "monthly", 15) == date(2025, 2, 15)
    assert advance(date(2025, 12, 5), "monthly", 28) == date(2026, 1, 28)


def test_monthly_day_28_exists_in_february():
    assert advance(date(2024, 1, 28), "monthly", 28) == date(2024, 2, 28)
    assert advance(date(2025, 1, 28), "monthly", 28) == date(2025, 2, 28)


def test_advance_rejects_unknown_frequency():
    with pytest.raises(ValidationError):
        advance(date(2025, 1, 1), "yearly")


def test_initial_next_run_future_start_is_kept():
    start = date(2025, 3, 1)
    assert initial_next_run(start, "weekly", None, date(2025, 2, 1)) == start
    assert initial_next_run(start, "monthly", 10, start) == start


def test_initial_next_run_weekly_catches_up_arithmetically():
    ref = date(2025, 6, 15)
    start = date(2025, 6, 5)
    assert initial_next_run(start, "weekly", None, ref) == date(2025, 6, 19)


def test_initial_next_run_weekly_lands_on_today():
    start = date(2025, 6, 1)
    assert initial_next_run(start, "weekly", None, date(2025, 6, 15)) == date(2025, 6, 15)


def test_initial_next_run_biweekly_years_behind():
    start = date(2020, 1, 6)
    result = initial_next_run(start, "biweekly", None, date(2025, 6, 15))
    assert result >= date(2025, 6, 15)
    assert (result - start).days % 14 == 0
    assert (result - date(2025, 6, 15)).days < 14


def test_initial_next_run_monthly_skips_to_following_month():
    # The series is start, advance(start), ... so the 20th of the start month is not in it.
    result = initial_next_run(date(2025, 1, 5), "monthly", 20, date(2025, 1, 10))
    assert result == date(2025, 2, 20)


def test_occurrences_between_is_inclusive():
    result = occurrences_between(date(2025, 6, 1), "weekly", None, date(2025, 6, 8), date(2025, 6, 22))
    assert result == [date(2025, 6, 8), date(2025, 6, 15), date(2025, 6, 22)]


def test_month_helpers():
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert first_of_next_month(2025, 12) == date(2026, 1, 1)
    assert prev_month("2025-01") == "2024-12"
    assert next_month("2025-12") == "2026-01"
    assert split_month_key("2025-06") == (2025, 6)


@pytest.mark.parametrize("year, month", [(0, 1), (2025, 0), (2025, 13), (9999, 1), (10000, 6)])
def test_validate_year_month_rejects(year, month):
    with pytest.raises(ValidationError):
        validate_year_month(year, month)


def test_display_dates():
    assert format_display_date(date(2025, 7, 1), "DD.MM.YYYY") == "01.07.2025"
    assert format_display_date("2025-07-01") == "07/01/2025"
    assert format_display_date("") == ""
    assert parse_display_date("2025-07-01", "MM/DD/YYYY") == date(2025, 7, 1)
    assert parse_display_date("nonsense", "MM/DD/YYYY") is None


def test_to_money_rounds_to_cents():
    assert str(to_money(0.1)) == "0.10"
    assert str(to_money("19.995")) == "20.00"
    assert str(to_money(5)) == "5.00"


@pytest.mark.parametrize("value", ["abc", None, True, "NaN", "Infinity", "1e40"])
def test_to_money_rejects(value):
    with pytest.raises(ValidationError):
        to_money(value)


def test_first_of_next_month_at_the_last_supported_year():
    assert first_of_next_month(9998, 12) == date(9999, 1, 1)
    with pytest.raises(ValidationError):
        first_of_next_month(9999, 12)


@pytest.mark.parametrize("d, frequency", [
    (date(9999, 12, 5), "monthly"),
    (date(9999, 12, 28), "weekly"),
    (date(9999, 12, 20), "biweekly"),
])
def test_advance_past_the_last_date_is_a_validation_error(d, frequency):
    with pytest.raises(ValidationError):
        advance(d, frequency, 5)


def test_coerce_date_drops_time_of_day():
    assert coerce_date(datetime(2025, 6, 1, 23, 59)) == date(2025, 6, 1)
    assert type(coerce_date(datetime(2025, 6, 1, 8, 0))) is date
    assert coerce_date(date(2025, 6, 1)) == date(2025, 6, 1)
    with pytest.raises(ValidationError, match="start date"):
        coerce_date("2025-06-01", "start date")
