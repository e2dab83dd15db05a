from datetime import datetime, timezone

import pytest

from moneyflow.domain import DateRange
from moneyflow.errors import InvalidDateRangeError, InvalidInputError, UnknownPeriodError
from moneyflow.periods import end_of_month, resolve_period, start_of_week

UTC = timezone.utc
NOW = datetime(2024, 1, 17, 15, 30, tzinfo=UTC)  # a Wednesday


def test_today():
    r = resolve_period("today", NOW)
    assert r.start == datetime(2024, 1, 17, tzinfo=UTC)
    assert r.end == datetime(2024, 1, 17, 23, 59, 59, 999999, tzinfo=UTC)


def test_week_starts_on_monday():
    r = resolve_period("week", NOW)
    assert r.start == datetime(2024, 1, 15, tzinfo=UTC)
    assert r.end == datetime(2024, 1, 21, 23, 59, 59, 999999, tzinfo=UTC)


def test_week_when_now_is_sunday_and_monday():
    sunday = datetime(2024, 1, 21, 22, 0, tzinfo=UTC)
    monday = datetime(2024, 1, 22, 0, 0, tzinfo=UTC)
    assert start_of_week(sunday) == datetime(2024, 1, 15, tzinfo=UTC)
    assert start_of_week(monday) == datetime(2024, 1, 22, tzinfo=UTC)


def test_month():
    r = resolve_period("month", NOW)
    assert r.start == datetime(2024, 1, 1, tzinfo=UTC)
    assert r.end == datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC)


def test_month_end_in_leap_february():
    assert end_of_month(datetime(2024, 2, 10)) == datetime(2024, 2, 29, 23, 59, 59, 999999)
    assert end_of_month(datetime(2023, 2, 10)) == datetime(2023, 2, 28, 23, 59, 59, 999999)


def test_year():
    r = resolve_period("year", NOW)
    assert r.start == datetime(2024, 1, 1, tzinfo=UTC)
    assert r.end == datetime(2024, 12, 31, 23, 59, 59, 999999, tzinfo=UTC)


def test_naive_now_gives_naive_bounds():
    r = resolve_period("today", datetime(2024, 5, 1, 12))
    assert r.start.tzinfo is None
    assert r.end.tzinfo is None


def test_custom_range_is_returned_as_is():
    custom = DateRange(datetime(2024, 1, 10, tzinfo=UTC), datetime(2024, 1, 20, tzinfo=UTC))
    assert resolve_period("custom", NOW, custom) == custom


def test_custom_range_with_start_after_end_is_rejected():
    custom = DateRange(datetime(2024, 1, 20, tzinfo=UTC), datetime(2024, 1, 10, tzinfo=UTC))
    with pytest.raises(InvalidDateRangeError):
        resolve_period("custom", NOW, custom)


def test_custom_without_range_is_rejected():
    with pytest.raises(UnknownPeriodError):
        resolve_period("custom", NOW)


def test_unknown_token():
    with pytest.raises(UnknownPeriodError):
        resolve_period("fortnight", NOW)


def test_invalid_input_errors_are_value_errors():
    with pytest.raises(ValueError):
        resolve_period("decade", NOW)
    assert issubclass(InvalidDateRangeError, InvalidInputError)
