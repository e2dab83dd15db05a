"""Turn a period token into a concrete reporting range.

Every helper keeps the tzinfo of the instant it is given, so an aware ``now``
yields aware bounds and a naive one yields naive bounds.
"""
from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from moneyflow.domain import DateRange
from moneyflow.errors import InvalidDateRangeError, UnknownPeriodError

PERIOD_TOKENS = ("today", "week", "month", "year", "custom")


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_week(dt: datetime) -> datetime:
    # weeks start on Monday
    return start_of_day(dt - timedelta(days=dt.weekday()))


def end_of_week(dt: datetime) -> datetime:
    return end_of_day(start_of_week(dt) + timedelta(days=6))


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt.replace(day=1))


def end_of_month(dt: datetime) -> datetime:
    return end_of_day(start_of_month(dt) + relativedelta(months=1) - timedelta(days=1))


def start_of_year(dt: datetime) -> datetime:
    return start_of_day(dt.replace(month=1, day=1))


def end_of_year(dt: datetime) -> datetime:
    return end_of_day(dt.replace(month=12, day=31))


def ensure_valid_range(date_range: DateRange) -> DateRange:
    if date_range.start > date_range.end:
        raise InvalidDateRangeError(date_range.start, date_range.end)
    return date_range


def resolve_period(token: str, now: datetime, custom: Optional[DateRange] = None) -> DateRange:
    """Resolve ``today``/``week``/``month``/``year``/``custom`` against ``now``.

    ``custom`` must come with an explicit range; a range whose start is after
    its end is rejected rather than swapped.
    """
    if token == "today":
        return DateRange(start_of_day(now), end_of_day(now))
    if token == "week":
        return DateRange(start_of_week(now), end_of_week(now))
    if token == "month":
        return DateRange(start_of_month(now), end_of_month(now))
    if token == "year":
        return DateRange(start_of_year(now), end_of_year(now))
    if token == "custom":
        if custom is None:
            raise UnknownPeriodError("custom (missing explicit range)")
        return ensure_valid_range(custom)
    raise UnknownPeriodError(token)
