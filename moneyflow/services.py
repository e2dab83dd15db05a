import logging
from datetime import datetime
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence, Tuple

from moneyflow.aggregation import category_breakdown, summary, time_series
from moneyflow.async_reports import dashboard_snapshot
from moneyflow.budgets import progress_for_budgets, progress_status
from moneyflow.domain import INCOME, OUTCOME, Budget, Category, DateRange, Transaction
from moneyflow.insights import largest_transaction, spending_averages, top_categories
from moneyflow.periods import resolve_period
from moneyflow.repository import Clock, InMemoryRepository, utc_now

logger = logging.getLogger(__name__)


class ViewContext(NamedTuple):
    """One consistent snapshot every view of a dashboard render reads from."""
    transactions: Tuple[Transaction, ...]
    categories: Tuple[Category, ...]
    budgets: Tuple[Budget, ...]
    date_range: DateRange
    now: datetime


View = Callable[[ViewContext], Dict[str, Any]]


def summary_view(ctx: ViewContext) -> Dict[str, Any]:
    return {"summary": summary(ctx.transactions, ctx.date_range)}


def breakdown_view(ctx: ViewContext) -> Dict[str, Any]:
    return {"breakdown": category_breakdown(ctx.transactions, ctx.categories, date_range=ctx.date_range)}


def time_series_view(ctx: ViewContext) -> Dict[str, Any]:
    return {"time_series": time_series(ctx.transactions, ctx.date_range)}


def budgets_view(ctx: ViewContext) -> Dict[str, Any]:
    rows = progress_for_budgets(ctx.budgets, ctx.transactions, ctx.date_range, ctx.now)
    return {"budgets": [(p, progress_status(p)) for p in rows]}


def insights_view(ctx: ViewContext) -> Dict[str, Any]:
    breakdown = category_breakdown(ctx.transactions, ctx.categories, date_range=ctx.date_range)
    return {
        "insights": {
            "top_outcome": top_categories(breakdown, OUTCOME),
            "top_income": top_categories(breakdown, INCOME),
            "averages": spending_averages(ctx.transactions, ctx.date_range),
            "largest_outcome": largest_transaction(ctx.transactions, OUTCOME, ctx.date_range),
            "largest_income": largest_transaction(ctx.transactions, INCOME, ctx.date_range),
        }
    }


DEFAULT_VIEWS: Tuple[View, ...] = (summary_view, breakdown_view, time_series_view, budgets_view, insights_view)


class DashboardService:
    """Facade tying the data-access snapshot to the aggregation views.

    views: functions taking a ViewContext and returning a partial result dict.
    """

    def __init__(
        self,
        repository: InMemoryRepository,
        clock: Clock = utc_now,
        views: Sequence[View] = DEFAULT_VIEWS,
    ):
        self.repository = repository
        self.clock = clock
        self.views = tuple(views)

    def reporting_range(self, token: str, custom: Optional[DateRange] = None) -> DateRange:
        return resolve_period(token, self.clock(), custom)

    def context(self, token: str, custom: Optional[DateRange] = None) -> ViewContext:
        now = self.clock()
        return ViewContext(
            transactions=self.repository.list_transactions(),
            categories=self.repository.list_categories(),
            budgets=self.repository.list_budgets(),
            date_range=resolve_period(token, now, custom),
            now=now,
        )

    def overview(self, token: str, custom: Optional[DateRange] = None) -> Dict[str, Any]:
        ctx = self.context(token, custom)
        logger.debug("overview %s: %s .. %s", token, ctx.date_range.start, ctx.date_range.end)
        report: Dict[str, Any] = {"range": ctx.date_range}
        for view in self.views:
            report.update(view(ctx))
        return report

    async def overview_async(self, token: str, custom: Optional[DateRange] = None) -> Dict[str, Any]:
        ctx = self.context(token, custom)
        report: Dict[str, Any] = {"range": ctx.date_range}
        report.update(await dashboard_snapshot(ctx, self.views))
        return report
