import logging
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from moneyflow.domain import Budget, DateRange
from moneyflow.errors import UnknownPeriodError
from moneyflow.periods import end_of_day, start_of_day

logger = logging.getLogger(__name__)

_STEPS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(weeks=1),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
}

# periods with a fixed length in days can skip whole cycles at once
_FIXED_DAYS = {"daily": 1, "weekly": 7}


def add_one_unit(instant: datetime, period: str) -> datetime:
    """Advance by one calendar unit; month and year ends are clamped (Jan 31 -> Feb 29)."""
    try:
        step = _STEPS[period]
    except KeyError:
        raise UnknownPeriodError(period) from None
    return instant + step


def cycle_end(cycle_start: datetime, period: str) -> datetime:
    return end_of_day(add_one_unit(cycle_start, period) - timedelta(days=1))


def next_cycle_start(cycle: DateRange) -> datetime:
    return start_of_day(cycle.end + timedelta(days=1))


def first_cycle(budget: Budget) -> DateRange:
    start = start_of_day(budget.start_date)
    return DateRange(start, cycle_end(start, budget.period))


def current_cycle(budget: Budget, now: datetime) -> DateRange:
    """Return the occurrence of ``budget`` that contains ``now``.

    Cycles are walked forward from the anchor; ``now`` equal to a cycle end
    still belongs to that cycle. An anchor in the future yields the first
    cycle.
    """
    cycle = first_cycle(budget)

    days = _FIXED_DAYS.get(budget.period)
    if days is not None and now > cycle.end:
        skipped = (start_of_day(now) - cycle.start).days // days
        start = cycle.start + timedelta(days=skipped * days)
        cycle = DateRange(start, cycle_end(start, budget.period))

    while now > cycle.end:
        start = next_cycle_start(cycle)
        cycle = DateRange(start, cycle_end(start, budget.period))

    logger.debug("budget %s: current %s cycle %s .. %s", budget.id, budget.period, cycle.start, cycle.end)
    return cycle


def cycle_sequence(budget: Budget, count: int) -> tuple[DateRange, ...]:
    """The first ``count`` cycles counted from the anchor."""
    cycles: list[DateRange] = []
    if count <= 0:
        return ()
    cycle = first_cycle(budget)
    cycles.append(cycle)
    while len(cycles) < count:
        start = next_cycle_start(cycle)
        cycle = DateRange(start, cycle_end(start, budget.period))
        cycles.append(cycle)
    return tuple(cycles)
