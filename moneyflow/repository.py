"""In-memory data access: the snapshot provider the engine reads from.

Records are kept in tuples and replaced wholesale on every change, so a
snapshot handed out earlier never changes under its reader.
"""
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from dateutil import parser as dtp

from moneyflow.domain import Account, Budget, Category, DateRange, Transaction
from moneyflow.errors import InvalidInputError, InvalidSeedError, RecordNotFoundError
from moneyflow.events import BUDGET_ALERT, TRANSACTION_ADDED, TRANSACTION_DELETED, EventBus
from moneyflow.filters import build_filter, is_active, iter_transactions
from moneyflow.functional import Either, Right, validate_budget, validate_transaction

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_instant(value) -> Optional[datetime]:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    if value is None:
        return None
    instant = value if isinstance(value, datetime) else dtp.isoparse(value)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def transaction_from_record(d: dict) -> Transaction:
    return Transaction(
        id=d["id"],
        type=d["type"],
        amount=d["amount"],
        currency=d.get("currency", "IDR"),
        category_id=d["category_id"],
        occurred_at=parse_instant(d["occurred_at"]),
        account_id=d.get("account_id"),
        description=d.get("description"),
        deleted_at=parse_instant(d.get("deleted_at")),
    )


def budget_from_record(d: dict) -> Budget:
    return Budget(
        id=d["id"],
        category_id=d["category_id"],
        amount=d["amount"],
        currency=d.get("currency", "IDR"),
        period=d["period"],
        start_date=parse_instant(d["start_date"]),
        end_date=parse_instant(d.get("end_date")),
    )


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Account, ...],
    Tuple[Category, ...],
    Tuple[Transaction, ...],
    Tuple[Budget, ...],
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    accounts = tuple(Account(**a) for a in data.get("accounts", []))
    categories = tuple(Category(**c) for c in data.get("categories", []))
    transactions = tuple(transaction_from_record(t) for t in data.get("transactions", []))
    budgets = tuple(budget_from_record(b) for b in data.get("budgets", []))

    for t in transactions:
        checked = validate_transaction(t, accounts, categories)
        if checked.is_left():
            raise InvalidSeedError("transaction", t.id, checked.get_error())
    for b in budgets:
        checked = validate_budget(b, categories)
        if checked.is_left():
            raise InvalidSeedError("budget", b.id, checked.get_error())

    logger.info(
        "loaded seed %s: %d accounts, %d categories, %d transactions, %d budgets",
        path, len(accounts), len(categories), len(transactions), len(budgets),
    )
    return accounts, categories, transactions, budgets


_READ_ONLY_FIELDS = {"id", "deleted_at"}


def check_changes(kind: str, changes: dict) -> dict:
    """Reject updates to the id or the soft-delete stamp; those have their own operations."""
    blocked = sorted(_READ_ONLY_FIELDS.intersection(changes))
    if blocked:
        raise InvalidInputError(f"{kind} fields cannot be updated: {', '.join(blocked)}")
    return changes


def _replace_by_id(records: tuple, record_id: str, kind: str, update: Callable) -> tuple:
    if not any(r.id == record_id for r in records):
        raise RecordNotFoundError(kind, record_id)
    return tuple(update(r) if r.id == record_id else r for r in records)


class InMemoryRepository:

    def __init__(
        self,
        accounts: Tuple[Account, ...] = (),
        categories: Tuple[Category, ...] = (),
        transactions: Tuple[Transaction, ...] = (),
        budgets: Tuple[Budget, ...] = (),
        bus: Optional[EventBus] = None,
        clock: Clock = utc_now,
    ):
        self._accounts = tuple(accounts)
        self._categories = tuple(categories)
        self._transactions = tuple(transactions)
        self._budgets = tuple(budgets)
        self.bus = bus or EventBus()
        self.clock = clock

    @classmethod
    def from_seed(cls, path: str, bus: Optional[EventBus] = None, clock: Clock = utc_now) -> "InMemoryRepository":
        accounts, categories, transactions, budgets = load_seed(path)
        return cls(accounts, categories, transactions, budgets, bus=bus, clock=clock)

    # --- reads

    def list_transactions(
        self,
        date_range: Optional[DateRange] = None,
        type_: Optional[str] = None,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> Tuple[Transaction, ...]:
        pred = build_filter(date_range, type_, category_id, account_id)
        active = iter_transactions(self._transactions, is_active)
        return tuple(sorted(iter_transactions(active, pred), key=lambda t: t.occurred_at, reverse=True))

    def list_budgets(self) -> Tuple[Budget, ...]:
        return self._budgets

    def list_categories(self) -> Tuple[Category, ...]:
        return tuple(sorted(self._categories, key=lambda c: c.name))

    def list_accounts(self) -> Tuple[Account, ...]:
        return tuple(sorted(self._accounts, key=lambda a: a.name))

    # --- transactions

    def create_transaction(self, t: Transaction) -> Either[dict, Transaction]:
        result = validate_transaction(t, self._accounts, self._categories)
        if result.is_left():
            logger.info("rejected transaction %s: %s", t.id, result.get_error()["error"])
            return result

        # handlers see the new record; it is stored only once they all succeed
        results = self.bus.publish(TRANSACTION_ADDED, {
            "transaction": t,
            "transactions": self.list_transactions() + (t,),
            "budgets": self._budgets,
            "now": self.clock(),
        })
        self._transactions = self._transactions + (t,)
        logger.debug("created transaction %s", t.id)

        for out in results:
            for alert in out.get("alerts", []):
                self.bus.publish(BUDGET_ALERT, alert)
        return Right(t)

    def update_transaction(self, tx_id: str, **changes) -> Either[dict, Transaction]:
        check_changes("Transaction", changes)
        current = next((t for t in self._transactions if t.id == tx_id and t.is_active), None)
        if current is None:
            raise RecordNotFoundError("Transaction", tx_id)

        result = validate_transaction(replace(current, **changes), self._accounts, self._categories)
        if result.is_left():
            return result

        updated = result.get_or_else(None)
        self._transactions = _replace_by_id(self._transactions, tx_id, "Transaction", lambda _: updated)
        logger.debug("updated transaction %s", tx_id)
        return Right(updated)

    def soft_delete_transaction(self, tx_id: str) -> Transaction:
        now = self.clock()
        self._transactions = _replace_by_id(
            self._transactions, tx_id, "Transaction", lambda t: replace(t, deleted_at=now)
        )
        deleted = next(t for t in self._transactions if t.id == tx_id)
        logger.debug("soft-deleted transaction %s", tx_id)
        self.bus.publish(TRANSACTION_DELETED, {"transaction": deleted})
        return deleted

    # --- budgets

    def create_budget(self, b: Budget) -> Either[dict, Budget]:
        result = validate_budget(b, self._categories)
        if result.is_right():
            self._budgets = self._budgets + (b,)
            logger.debug("created budget %s", b.id)
        return result

    def update_budget(self, budget_id: str, **changes) -> Either[dict, Budget]:
        check_changes("Budget", changes)
        current = next((b for b in self._budgets if b.id == budget_id), None)
        if current is None:
            raise RecordNotFoundError("Budget", budget_id)

        result = validate_budget(replace(current, **changes), self._categories)
        if result.is_right():
            updated = result.get_or_else(None)
            self._budgets = _replace_by_id(self._budgets, budget_id, "Budget", lambda _: updated)
        return result

    def delete_budget(self, budget_id: str) -> None:
        if not any(b.id == budget_id for b in self._budgets):
            raise RecordNotFoundError("Budget", budget_id)
        self._budgets = tuple(b for b in self._budgets if b.id != budget_id)
        logger.debug("deleted budget %s", budget_id)

    # --- accounts and categories

    def create_account(self, account: Account) -> Account:
        self._accounts = self._accounts + (account,)
        return account

    def create_category(self, category: Category) -> Category:
        self._categories = self._categories + (category,)
        return category

