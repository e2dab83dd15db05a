from datetime import datetime, timezone

import pytest

from moneyflow.budgets import effective_range, progress, progress_for_budgets, progress_status
from moneyflow.cycles import current_cycle
from moneyflow.domain import Budget, DateRange, Transaction
from moneyflow.errors import InvalidBudgetError

UTC = timezone.utc
NOW = datetime(2024, 1, 15, tzinfo=UTC)
JANUARY = DateRange(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC))


def make_budget(amount=2000000, cat_id="food", period="monthly", start=datetime(2024, 1, 1, tzinfo=UTC), id="b1"):
    return Budget(id=id, category_id=cat_id, amount=amount, currency="IDR", period=period, start_date=start)


def make_tx(id, type_, amount, cat_id, day, month=1):
    return Transaction(
        id=id,
        type=type_,
        amount=amount,
        currency="IDR",
        category_id=cat_id,
        occurred_at=datetime(2024, month, day, 12, tzinfo=UTC),
    )


def test_over_budget_percentage_is_clamped():
    trans = [
        make_tx("t1", "outcome", 1500000, "food", 5),
        make_tx("t2", "outcome", 1000000, "food", 20),
    ]
    p = progress(make_budget(), trans, JANUARY, NOW)
    assert p.spent == 2500000
    assert p.remaining == -500000
    assert p.percentage == 100
    assert p.is_over_budget is True


def test_reporting_range_narrows_the_cycle():
    budget = make_budget()
    reporting = DateRange(datetime(2024, 1, 10, tzinfo=UTC), datetime(2024, 1, 20, 23, 59, 59, 999999, tzinfo=UTC))
    trans = [
        make_tx("t1", "outcome", 300, "food", 5),
        make_tx("t2", "outcome", 200, "food", 12),
        make_tx("t3", "outcome", 400, "food", 25),
    ]

    assert effective_range(reporting, current_cycle(budget, NOW)) == reporting
    assert progress(budget, trans, reporting, NOW).spent == 200


def test_income_in_the_category_reduces_spend():
    trans = [
        make_tx("t1", "outcome", 500000, "food", 3),
        make_tx("t2", "income", 200000, "food", 4),
    ]
    p = progress(make_budget(), trans, JANUARY, NOW)
    assert p.spent == 300000
    assert p.remaining == 1700000
    assert p.percentage == pytest.approx(15.0)
    assert p.is_over_budget is False


def test_other_categories_do_not_count():
    trans = [make_tx("t1", "outcome", 900, "transport", 3)]
    assert progress(make_budget(), trans, JANUARY, NOW).spent == 0


def test_no_transactions():
    p = progress(make_budget(), [], JANUARY, NOW)
    assert p.spent == 0
    assert p.remaining == 2000000
    assert p.percentage == 0
    assert p.is_over_budget is False


def test_disjoint_reporting_range_means_zero_spend():
    february = DateRange(datetime(2024, 2, 1, tzinfo=UTC), datetime(2024, 2, 29, tzinfo=UTC))
    trans = [make_tx("t1", "outcome", 700, "food", 10, month=2)]
    cycle = current_cycle(make_budget(), NOW)

    assert effective_range(february, cycle) is None
    assert progress(make_budget(), trans, february, NOW).spent == 0


def test_budget_starting_in_the_future_has_no_spend_yet():
    budget = make_budget(start=datetime(2024, 2, 1, tzinfo=UTC))
    trans = [make_tx("t1", "outcome", 700, "food", 10)]
    assert progress(budget, trans, JANUARY, NOW).spent == 0


def test_zero_amount_budget():
    trans = [make_tx("t1", "outcome", 100, "food", 3)]
    p = progress(make_budget(amount=0), trans, JANUARY, NOW)
    assert p.percentage == 0
    assert p.is_over_budget is True
    assert p.remaining == -100

    assert progress(make_budget(amount=0), [], JANUARY, NOW).is_over_budget is False


def test_negative_amount_is_rejected():
    with pytest.raises(InvalidBudgetError):
        progress(make_budget(amount=-1), [], JANUARY, NOW)


def test_partial_percentage():
    trans = [make_tx("t1", "outcome", 500000, "food", 3)]
    assert progress(make_budget(), trans, JANUARY, NOW).percentage == pytest.approx(25.0)


def test_progress_for_budgets_keeps_order():
    budgets = [make_budget(id="b1", cat_id="food"), make_budget(id="b2", cat_id="fun", amount=100)]
    trans = [make_tx("t1", "outcome", 150, "fun", 8)]
    rows = progress_for_budgets(budgets, trans, JANUARY, NOW)
    assert [p.budget.id for p in rows] == ["b1", "b2"]
    assert rows[1].is_over_budget is True


def test_progress_for_budgets_without_range():
    assert progress_for_budgets([make_budget()], [], None, NOW) == []


def test_progress_status_tiers():
    budget = make_budget(amount=1000)
    ok = progress(budget, [make_tx("t1", "outcome", 500, "food", 3)], JANUARY, NOW)
    warning = progress(budget, [make_tx("t1", "outcome", 850, "food", 3)], JANUARY, NOW)
    over = progress(budget, [make_tx("t1", "outcome", 1200, "food", 3)], JANUARY, NOW)
    assert [progress_status(p) for p in (ok, warning, over)] == ["ok", "warning", "over"]


def test_progress_to_dict():
    d = progress(make_budget(), [], JANUARY, NOW).to_dict()
    assert set(d) == {"budget", "spent", "remaining", "percentage", "isOverBudget"}
    assert d["budget"]["start_date"] == "2024-01-01T00:00:00+00:00"
