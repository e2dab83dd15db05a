from datetime import datetime
from typing import Iterable, Optional

from moneyflow.cycles import current_cycle
from moneyflow.domain import INCOME, OUTCOME, Budget, BudgetProgress, DateRange, Transaction
from moneyflow.errors import InvalidBudgetError
from moneyflow.filters import by_category, by_date_range
from moneyflow.periods import ensure_valid_range

WARNING_PERCENTAGE = 80


def effective_range(reporting_range: DateRange, cycle: DateRange) -> Optional[DateRange]:
    """Overlap of the reporting window and a budget cycle, ``None`` when disjoint."""
    overlap = DateRange(
        start=max(reporting_range.start, cycle.start),
        end=min(reporting_range.end, cycle.end),
    )
    if overlap.is_empty:
        return None
    return overlap


def net_spent(trans: Iterable[Transaction], category_id: str, window: Optional[DateRange]):
    """Outcome minus income for one category inside ``window``.

    Income booked against the category (refunds) lowers the spend.
    """
    if window is None:
        return 0
    in_category = by_category(category_id)
    in_window = by_date_range(window)
    outcome = income = 0
    for t in trans:
        if not (in_category(t) and in_window(t)):
            continue
        if t.type == OUTCOME:
            outcome += t.amount
        elif t.type == INCOME:
            income += t.amount
    return outcome - income


def progress(
    budget: Budget,
    trans: Iterable[Transaction],
    reporting_range: DateRange,
    now: datetime,
) -> BudgetProgress:
    if budget.amount < 0:
        raise InvalidBudgetError(f"Budget {budget.id} has a negative amount: {budget.amount}")
    ensure_valid_range(reporting_range)

    cycle = current_cycle(budget, now)
    spent = net_spent(trans, budget.category_id, effective_range(reporting_range, cycle))

    percentage = float(spent / budget.amount * 100) if budget.amount > 0 else 0.0
    return BudgetProgress(
        budget=budget,
        spent=spent,
        remaining=budget.amount - spent,
        percentage=min(percentage, 100.0),
        is_over_budget=spent > budget.amount,
    )


def progress_for_budgets(
    budgets: Iterable[Budget],
    trans: Iterable[Transaction],
    reporting_range: Optional[DateRange],
    now: datetime,
) -> list[BudgetProgress]:
    if reporting_range is None:
        return []
    trans = tuple(trans)
    return [progress(b, trans, reporting_range, now) for b in budgets]


def progress_status(p: BudgetProgress) -> str:
    if p.is_over_budget:
        return "over"
    if p.percentage > WARNING_PERCENTAGE:
        return "warning"
    return "ok"
