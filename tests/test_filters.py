from datetime import datetime, timezone
from itertools import islice

from moneyflow.domain import DateRange, Transaction
from moneyflow.filters import (
    all_of,
    build_filter,
    by_account,
    by_category,
    by_date_range,
    by_type,
    iter_transactions,
)

UTC = timezone.utc


def make_tx(id, cat_id, type_, day, year=2024, acc_id="a1"):
    return Transaction(id, type_, 100, "IDR", cat_id, datetime(year, 5, day, tzinfo=UTC), account_id=acc_id)


def test_by_category():
    t1 = make_tx("t1", "food", "outcome", 1)
    t2 = make_tx("t2", "transport", "outcome", 2)
    result = list(filter(by_category("food"), [t1, t2]))
    assert [t.id for t in result] == ["t1"]


def test_by_date_range():
    t1 = make_tx("t1", "food", "outcome", 1)
    t2 = make_tx("t2", "food", "outcome", 1, year=2023)
    r = DateRange(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 12, 31, tzinfo=UTC))
    assert [t.id for t in filter(by_date_range(r), [t1, t2])] == ["t1"]


def test_by_type_and_account():
    t1 = make_tx("t1", "food", "outcome", 1, acc_id="a1")
    t2 = make_tx("t2", "salary", "income", 1, acc_id="a2")
    assert [t.id for t in filter(by_type("income"), [t1, t2])] == ["t2"]
    assert [t.id for t in filter(by_account("a1"), [t1, t2])] == ["t1"]


def test_all_of_and_build_filter():
    t1 = make_tx("t1", "food", "outcome", 1, acc_id="a1")
    t2 = make_tx("t2", "food", "income", 1, acc_id="a1")
    pred = all_of(by_category("food"), by_type("outcome"))
    assert [t.id for t in filter(pred, [t1, t2])] == ["t1"]

    assert build_filter()(t1) is True
    assert build_filter(category_id="food", type_="income")(t2) is True
    assert build_filter(account_id="a9")(t1) is False


def test_iter_transactions_is_lazy():
    trans = [make_tx(f"t{i}", "food", "outcome", i + 1) for i in range(5)]
    calls = {"n": 0}

    def pred(t):
        calls["n"] += 1
        return True

    first_two = list(islice(iter_transactions(trans, pred), 2))
    assert len(first_two) == 2
    assert calls["n"] < len(trans)
