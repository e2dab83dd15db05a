from typing import Callable, Iterable, Iterator, Optional

from moneyflow.domain import DateRange, Transaction

Predicate = Callable[[Transaction], bool]


def iter_transactions(trans: Iterable[Transaction], pred: Predicate) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def by_category(category_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category_id == category_id

    return _filter


def by_account(account_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.account_id == account_id

    return _filter


def by_type(type_: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == type_

    return _filter


def by_date_range(date_range: DateRange) -> Predicate:
    # inclusive on both ends
    def _filter(t: Transaction) -> bool:
        return date_range.start <= t.occurred_at <= date_range.end

    return _filter


def is_active(t: Transaction) -> bool:
    return t.deleted_at is None


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def build_filter(
    date_range: Optional[DateRange] = None,
    type_: Optional[str] = None,
    category_id: Optional[str] = None,
    account_id: Optional[str] = None,
) -> Predicate:
    preds: list[Predicate] = []
    if date_range is not None:
        preds.append(by_date_range(date_range))
    if type_ is not None:
        preds.append(by_type(type_))
    if category_id is not None:
        preds.append(by_category(category_id))
    if account_id is not None:
        preds.append(by_account(account_id))
    return all_of(*preds)
