from datetime import datetime, timezone

from moneyflow.aggregation import category_breakdown
from moneyflow.domain import Category, DateRange, Transaction
from moneyflow.insights import days_in_range, largest_transaction, spending_averages, top_categories

UTC = timezone.utc


def make_tx(id, type_, amount, cat_id, day):
    return Transaction(id, type_, amount, "IDR", cat_id, datetime(2025, 1, day, 10, tzinfo=UTC))


def make_sample():
    cats = (
        Category("c1", "Food", "outcome"),
        Category("c2", "Transport", "outcome"),
        Category("c3", "Salary", "income"),
    )
    trans = (
        make_tx("t1", "outcome", 300, "c1", 1),
        make_tx("t2", "outcome", 200, "c2", 2),
        make_tx("t3", "income", 5000, "c3", 3),
        make_tx("t4", "outcome", 700, "c1", 4),
        make_tx("t5", "outcome", 100, "c2", 5),
    )
    return cats, trans


def test_top_categories_basic_sum_and_order():
    cats, trans = make_sample()
    top = top_categories(category_breakdown(trans, cats), "outcome", limit=2)
    assert [(r.category_name, r.amount) for r in top] == [("Food", 1000), ("Transport", 300)]


def test_top_categories_ignores_other_type():
    cats, trans = make_sample()
    names = [r.category_name for r in top_categories(category_breakdown(trans, cats), "outcome")]
    assert "Salary" not in names


def test_top_categories_limit_bigger_than_rows():
    cats, trans = make_sample()
    assert len(top_categories(category_breakdown(trans, cats), "outcome", limit=10)) == 2
    assert top_categories(category_breakdown(trans, cats), "outcome", limit=0) == []


def test_days_in_range_counts_both_ends():
    r = DateRange(datetime(2025, 1, 1, tzinfo=UTC), datetime(2025, 1, 10, 23, 59, 59, 999999, tzinfo=UTC))
    assert days_in_range(r) == 10


def test_spending_averages_over_range():
    _, trans = make_sample()
    r = DateRange(datetime(2025, 1, 1, tzinfo=UTC), datetime(2025, 1, 10, 23, 59, 59, 999999, tzinfo=UTC))
    avg = spending_averages(trans, r)
    assert avg["total_outcome"] == 1300
    assert avg["days"] == 10
    assert avg["daily"] == 130
    assert avg["weekly"] == 910
    assert avg["monthly"] == 3900


def test_spending_averages_without_range_spans_the_transactions():
    _, trans = make_sample()
    avg = spending_averages(trans)
    assert avg["days"] == 5
    assert avg["daily"] == 260


def test_spending_averages_empty():
    avg = spending_averages([])
    assert avg["daily"] == 0
    assert avg["days"] == 1


def test_largest_transaction():
    _, trans = make_sample()
    assert largest_transaction(trans, "outcome").id == "t4"
    assert largest_transaction(trans, "income").id == "t3"
    assert largest_transaction([], "income") is None
