from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Generic, Iterable, Optional, TypeVar, Union

from moneyflow.domain import (
    BUDGET_PERIODS,
    TRANSACTION_TYPES,
    Account,
    Budget,
    Category,
    DateRange,
    Transaction,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


@dataclass(frozen=True)
class Some(Generic[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self.value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False


@dataclass(frozen=True)
class Nothing(Generic[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True


Maybe = Union[Some[T], Nothing[T]]


@dataclass(frozen=True)
class Right(Generic[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self.value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def get_error(self):
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Generic[E]):
    error: E

    def map(self, f: Callable) -> 'Left[E]':
        return self

    def bind(self, f: Callable) -> 'Left[E]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self.error


Either = Union[Left[E], Right[T]]


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def validate_date_range(start: datetime, end: datetime) -> Either[dict, DateRange]:
    if start > end:
        return Left({
            "error": "invalid_date_range",
            "message": "Start date must be on or before end date",
            "start": start.isoformat(),
            "end": end.isoformat(),
        })
    return Right(DateRange(start, end))


def validate_transaction(
    t: Transaction,
    accs: Iterable[Account],
    cats: Iterable[Category],
) -> Either[dict, Transaction]:
    if t.type not in TRANSACTION_TYPES:
        return Left({
            "error": "invalid_type",
            "message": f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}",
            "type": t.type,
        })

    if t.amount < 0:
        return Left({
            "error": "negative_amount",
            "message": "Amount must not be negative; use the transaction type for direction",
            "amount": t.amount,
        })

    if t.account_id is not None and not any(acc.id == t.account_id for acc in accs):
        return Left({
            "error": "account_not_found",
            "message": f"Account with ID {t.account_id} does not exist",
            "account_id": t.account_id,
        })

    category = safe_category(cats, t.category_id)
    if category.is_none():
        return Left({
            "error": "category_not_found",
            "message": f"Category with ID {t.category_id} does not exist",
            "category_id": t.category_id,
        })

    cat = category.get_or_else(None)
    if not cat.accepts(t.type):
        return Left({
            "error": "category_type_mismatch",
            "message": f"Category {cat.name} only accepts {cat.allowed_type} transactions",
            "category_type": cat.allowed_type,
            "type": t.type,
        })

    return Right(t)


def validate_budget(b: Budget, cats: Iterable[Category]) -> Either[dict, Budget]:
    if b.period not in BUDGET_PERIODS:
        return Left({
            "error": "unknown_period",
            "message": f"Budget period must be one of {', '.join(BUDGET_PERIODS)}",
            "period": b.period,
        })

    if b.amount < 0:
        return Left({
            "error": "negative_amount",
            "message": "Budget amount must not be negative",
            "amount": b.amount,
        })

    if safe_category(cats, b.category_id).is_none():
        return Left({
            "error": "category_not_found",
            "message": f"Category with ID {b.category_id} does not exist",
            "category_id": b.category_id,
        })

    return Right(b)


def category_name(cats: Iterable[Category], cat_id: str, default: Optional[str] = "Unknown") -> Optional[str]:
    return safe_category(cats, cat_id).map(lambda c: c.name).get_or_else(default)
