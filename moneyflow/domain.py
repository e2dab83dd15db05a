from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional, Union

TransactionType = Literal["income", "outcome"]
AllowedType = Literal["income", "outcome", "both"]
BudgetPeriod = Literal["daily", "weekly", "monthly", "yearly"]

Amount = Union[int, float, Decimal]

INCOME = "income"
OUTCOME = "outcome"
TRANSACTION_TYPES = (INCOME, OUTCOME)
BUDGET_PERIODS = ("daily", "weekly", "monthly", "yearly")


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    currency: str


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    allowed_type: AllowedType = "both"

    def accepts(self, type_: str) -> bool:
        return self.allowed_type == "both" or self.allowed_type == type_


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    amount: Amount             # always >= 0, the sign comes from `type`
    currency: str
    category_id: str
    occurred_at: datetime      # when it happened, not when it was recorded
    account_id: Optional[str] = None
    description: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @property
    def signed_amount(self) -> Amount:
        return self.amount if self.type == INCOME else -self.amount


# A recurring spending cap for one category
@dataclass(frozen=True)
class Budget:
    id: str
    category_id: str
    amount: Amount
    currency: str
    period: BudgetPeriod
    start_date: datetime       # anchor of the first cycle
    end_date: Optional[datetime] = None


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @property
    def is_empty(self) -> bool:
        return self.start > self.end


@dataclass(frozen=True)
class FinancialSummary:
    total_income: Amount = 0
    total_outcome: Amount = 0
    net_balance: Amount = 0
    account_balance: Amount = 0

    def to_dict(self) -> dict:
        return {
            "totalIncome": self.total_income,
            "totalOutcome": self.total_outcome,
            "netBalance": self.net_balance,
            "accountBalance": self.account_balance,
        }


@dataclass(frozen=True)
class CategoryBreakdown:
    category_id: str
    category_name: str
    amount: Amount
    count: int
    type: TransactionType

    def to_dict(self) -> dict:
        return {
            "category_id": self.category_id,
            "category_name": self.category_name,
            "amount": self.amount,
            "count": self.count,
            "type": self.type,
        }


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: str                  # YYYY-MM-DD, UTC
    income: Amount
    outcome: Amount
    net: Amount

    def to_dict(self) -> dict:
        return {"date": self.date, "income": self.income, "outcome": self.outcome, "net": self.net}


@dataclass(frozen=True)
class BudgetProgress:
    budget: Budget
    spent: Amount
    remaining: Amount
    percentage: float          # clamped to 100 for display
    is_over_budget: bool       # from the unclamped spend

    def to_dict(self) -> dict[str, Any]:
        b = self.budget
        return {
            "budget": {
                "id": b.id,
                "category_id": b.category_id,
                "amount": b.amount,
                "currency": b.currency,
                "period": b.period,
                "start_date": b.start_date.isoformat(),
                "end_date": b.end_date.isoformat() if b.end_date else None,
            },
            "spent": self.spent,
            "remaining": self.remaining,
            "percentage": self.percentage,
            "isOverBudget": self.is_over_budget,
        }
