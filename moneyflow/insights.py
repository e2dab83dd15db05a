from itertools import islice
from typing import Iterable, Optional

from moneyflow.aggregation import filter_transactions
from moneyflow.domain import OUTCOME, CategoryBreakdown, DateRange, Transaction


def top_categories(
    breakdown: Iterable[CategoryBreakdown], type_: str, limit: int = 5
) -> list[CategoryBreakdown]:
    # breakdown rows are already sorted by amount
    rows = (row for row in breakdown if row.type == type_)
    return list(islice(rows, max(0, limit)))


def days_in_range(date_range: DateRange) -> int:
    """Calendar days touched by the range, both ends included."""
    return abs((date_range.end.date() - date_range.start.date()).days) + 1


def spending_averages(trans: Iterable[Transaction], date_range: Optional[DateRange] = None) -> dict:
    """Average outcome per day, week and month over the period.

    Without a range the period runs from the earliest to the latest
    transaction.
    """
    selected = filter_transactions(trans, date_range)
    total_outcome = sum((t.amount for t in selected if t.type == OUTCOME), 0)

    days = 1
    if date_range is not None:
        days = days_in_range(date_range)
    elif selected:
        instants = [t.occurred_at for t in selected]
        days = days_in_range(DateRange(min(instants), max(instants)))

    daily = total_outcome / days
    return {
        "total_outcome": total_outcome,
        "days": days,
        "daily": daily,
        "weekly": daily * 7,
        "monthly": daily * 30,
    }


def largest_transaction(
    trans: Iterable[Transaction], type_: str, date_range: Optional[DateRange] = None
) -> Optional[Transaction]:
    candidates = filter_transactions(trans, date_range, type_)
    if not candidates:
        return None
    return max(candidates, key=lambda t: t.amount)
