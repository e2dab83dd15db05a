"""Synthetic data for the demo dashboard.

Nothing here is persisted: the demo repository serves one generated snapshot
and its mutations hand back fabricated records without storing them.
"""
import logging
from dataclasses import replace
from datetime import datetime, time, timedelta
from typing import NamedTuple, Optional, Tuple

import numpy as np

from moneyflow.domain import Account, Budget, Category, Transaction
from moneyflow.errors import RecordNotFoundError
from moneyflow.functional import Either, validate_budget, validate_transaction
from moneyflow.periods import start_of_month
from moneyflow.repository import InMemoryRepository, check_changes, utc_now

logger = logging.getLogger(__name__)

DEMO_CURRENCY = "IDR"

DEMO_CATEGORIES = (
    Category("cat-1", "Food & Dining", "outcome"),
    Category("cat-2", "Transportation", "outcome"),
    Category("cat-3", "Shopping", "outcome"),
    Category("cat-4", "Bills & Utilities", "outcome"),
    Category("cat-5", "Entertainment", "outcome"),
    Category("cat-6", "Salary", "income"),
    Category("cat-7", "Freelance", "income"),
    Category("cat-8", "Investment", "income"),
)

DEMO_ACCOUNTS = (
    Account("acc-1", "Cash", DEMO_CURRENCY),
    Account("acc-2", "Bank Account", DEMO_CURRENCY),
    Account("acc-3", "Credit Card", DEMO_CURRENCY),
)

OUTCOME_AMOUNTS = (50000, 75000, 100000, 150000, 200000, 250000, 300000, 500000)
DESCRIPTIONS = (
    "Lunch at restaurant",
    "Grocery shopping",
    "Uber ride",
    "Coffee with friends",
    "Movie tickets",
    "Online shopping",
    "Electricity bill",
    "Phone bill",
    "Gym membership",
    "Dinner out",
)
OUTCOME_COUNT = 25
HISTORY_DAYS = 30


class DemoDataset(NamedTuple):
    accounts: Tuple[Account, ...]
    categories: Tuple[Category, ...]
    transactions: Tuple[Transaction, ...]
    budgets: Tuple[Budget, ...]


def demo_transactions(now: datetime, rng: np.random.Generator) -> Tuple[Transaction, ...]:
    income_cats = [c for c in DEMO_CATEGORIES if c.allowed_type in ("income", "both")]
    outcome_cats = [c for c in DEMO_CATEGORIES if c.allowed_type in ("outcome", "both")]
    bank = DEMO_ACCOUNTS[1]

    first_of_month = start_of_month(now)
    trans = [
        Transaction(
            id="tx-income-1",
            type="income",
            amount=15000000,
            currency=DEMO_CURRENCY,
            category_id=income_cats[0].id,
            account_id=bank.id,
            description="Monthly Salary",
            occurred_at=first_of_month,
        ),
        Transaction(
            id="tx-income-2",
            type="income",
            amount=2500000,
            currency=DEMO_CURRENCY,
            category_id=income_cats[1].id if len(income_cats) > 1 else income_cats[0].id,
            account_id=bank.id,
            description="Freelance Project",
            occurred_at=now - timedelta(days=5),
        ),
    ]

    for i in range(OUTCOME_COUNT):
        days_ago = int(rng.integers(0, HISTORY_DAYS))
        at = datetime.combine(
            (now - timedelta(days=days_ago)).date(),
            time(int(rng.integers(0, 24)), int(rng.integers(0, 60))),
            tzinfo=now.tzinfo,
        )
        trans.append(Transaction(
            id=f"tx-outcome-{i}",
            type="outcome",
            amount=int(rng.choice(OUTCOME_AMOUNTS)),
            currency=DEMO_CURRENCY,
            category_id=outcome_cats[int(rng.integers(0, len(outcome_cats)))].id,
            account_id=DEMO_ACCOUNTS[int(rng.integers(0, len(DEMO_ACCOUNTS)))].id,
            description=DESCRIPTIONS[int(rng.integers(0, len(DESCRIPTIONS)))],
            occurred_at=at,
        ))

    # newest first
    return tuple(sorted(trans, key=lambda t: t.occurred_at, reverse=True))


def demo_budgets(now: datetime) -> Tuple[Budget, ...]:
    anchor = start_of_month(now)
    return (
        Budget("budget-1", "cat-1", 2000000, DEMO_CURRENCY, "monthly", anchor),  # Food & Dining
        Budget("budget-2", "cat-3", 1500000, DEMO_CURRENCY, "monthly", anchor),  # Shopping
    )


def demo_dataset(now: datetime, seed: Optional[int] = None) -> DemoDataset:
    rng = np.random.default_rng(seed)
    return DemoDataset(
        accounts=DEMO_ACCOUNTS,
        categories=DEMO_CATEGORIES,
        transactions=demo_transactions(now, rng),
        budgets=demo_budgets(now),
    )


class DemoRepository(InMemoryRepository):
    """Serves a generated snapshot; writes are validated and echoed back, never stored."""

    @classmethod
    def generate(cls, now: Optional[datetime] = None, seed: Optional[int] = None, **kwargs) -> "DemoRepository":
        clock = kwargs.pop("clock", utc_now)
        data = demo_dataset(now or clock(), seed)
        logger.info("demo mode: generated %d transactions", len(data.transactions))
        return cls(*data, clock=clock, **kwargs)

    def _stamp(self, prefix: str) -> str:
        return f"demo-{prefix}-{int(self.clock().timestamp() * 1000)}"

    def create_transaction(self, t: Transaction) -> Either[dict, Transaction]:
        return validate_transaction(t, self._accounts, self._categories).map(
            lambda ok: replace(ok, id=self._stamp("tx"))
        )

    def _active(self, tx_id: str) -> Transaction:
        found = next((t for t in self._transactions if t.id == tx_id and t.is_active), None)
        if found is None:
            raise RecordNotFoundError("Transaction", tx_id)
        return found

    def _budget(self, budget_id: str) -> Budget:
        found = next((b for b in self._budgets if b.id == budget_id), None)
        if found is None:
            raise RecordNotFoundError("Budget", budget_id)
        return found

    def update_transaction(self, tx_id: str, **changes) -> Either[dict, Transaction]:
        check_changes("Transaction", changes)
        current = self._active(tx_id)
        return validate_transaction(replace(current, **changes), self._accounts, self._categories)

    def soft_delete_transaction(self, tx_id: str) -> Transaction:
        return replace(self._active(tx_id), deleted_at=self.clock())

    def create_budget(self, b: Budget) -> Either[dict, Budget]:
        return validate_budget(b, self._categories).map(lambda ok: replace(ok, id=self._stamp("budget")))

    def update_budget(self, budget_id: str, **changes) -> Either[dict, Budget]:
        check_changes("Budget", changes)
        return validate_budget(replace(self._budget(budget_id), **changes), self._categories)

    def delete_budget(self, budget_id: str) -> None:
        self._budget(budget_id)

    def create_account(self, account: Account) -> Account:
        return replace(account, id=self._stamp("acc"))

    def create_category(self, category: Category) -> Category:
        return replace(category, id=self._stamp("cat"))
