"""Pure reductions over a snapshot of transactions.

Callers hand in the currently visible (non-deleted) records. Nothing here
mutates its input and every result is a freshly built object.
"""
from datetime import datetime, timezone
from typing import Iterable, Optional

from moneyflow.domain import (
    INCOME,
    OUTCOME,
    Category,
    CategoryBreakdown,
    DateRange,
    FinancialSummary,
    TimeSeriesPoint,
    Transaction,
)
from moneyflow.filters import build_filter, is_active
from moneyflow.functional import category_name
from moneyflow.periods import ensure_valid_range, resolve_period


def active_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(filter(is_active, trans))


def filter_transactions(
    trans: Iterable[Transaction],
    date_range: Optional[DateRange] = None,
    type_: Optional[str] = None,
    category_id: Optional[str] = None,
    account_id: Optional[str] = None,
) -> tuple[Transaction, ...]:
    if date_range is not None:
        ensure_valid_range(date_range)
    return tuple(filter(build_filter(date_range, type_, category_id, account_id), trans))


def summary(trans: Iterable[Transaction], date_range: Optional[DateRange] = None) -> FinancialSummary:
    selected = filter_transactions(trans, date_range)
    income = sum((t.amount for t in selected if t.type == INCOME), 0)
    outcome = sum((t.amount for t in selected if t.type == OUTCOME), 0)
    # same signed running total as the net balance, not an account ledger
    account_balance = sum((t.signed_amount for t in selected), 0)
    return FinancialSummary(
        total_income=income,
        total_outcome=outcome,
        net_balance=income - outcome,
        account_balance=account_balance,
    )


def summary_this_month(trans: Iterable[Transaction], now: datetime) -> FinancialSummary:
    return summary(trans, resolve_period("month", now))


def category_breakdown(
    trans: Iterable[Transaction],
    cats: Iterable[Category] = (),
    type_: Optional[str] = None,
    date_range: Optional[DateRange] = None,
) -> list[CategoryBreakdown]:
    """Totals per (category, type), largest first.

    A category allowing both types can show up twice. Equal amounts keep the
    order in which their group was first seen.
    """
    cats = tuple(cats)
    totals: dict[tuple[str, str], list] = {}
    for t in filter_transactions(trans, date_range, type_):
        key = (t.category_id, t.type)
        if key not in totals:
            totals[key] = [0, 0]
        totals[key][0] += t.amount
        totals[key][1] += 1

    rows = [
        CategoryBreakdown(
            category_id=cat_id,
            category_name=category_name(cats, cat_id),
            amount=amount,
            count=count,
            type=type_key,
        )
        for (cat_id, type_key), (amount, count) in totals.items()
    ]
    return sorted(rows, key=lambda r: r.amount, reverse=True)


def utc_day(instant: datetime) -> str:
    """YYYY-MM-DD of ``instant`` in UTC; naive instants are taken as UTC."""
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc)
    return instant.date().isoformat()


def time_series(trans: Iterable[Transaction], date_range: Optional[DateRange] = None) -> list[TimeSeriesPoint]:
    days: dict[str, list] = {}
    for t in filter_transactions(trans, date_range):
        day = days.setdefault(utc_day(t.occurred_at), [0, 0])
        if t.type == INCOME:
            day[0] += t.amount
        else:
            day[1] += t.amount

    return [
        TimeSeriesPoint(date=date, income=income, outcome=outcome, net=income - outcome)
        for date, (income, outcome) in sorted(days.items())
    ]
