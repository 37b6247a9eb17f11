from dataclasses import dataclass
from datetime import datetime

CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Travel",
    "Education",
    "Other",
)

PAYMENT_METHODS = ("card", "cash", "bank", "digital")

BUDGET_PERIODS = ("weekly", "monthly", "yearly")

STATUS_GOOD = "good"
STATUS_WARNING = "warning"
STATUS_OVER = "over"


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: float          # never negative
    category: str
    payment_method: str
    date: datetime         # set by the store, local time


# A spending limit for a category
@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    amount: float
    period: str = "monthly"  # label only, status always uses the calendar month


@dataclass(frozen=True)
class ExpenseInput:
    description: str
    amount: float
    category: str
    payment_method: str = "card"


@dataclass(frozen=True)
class BudgetInput:
    category: str
    amount: float
    period: str = "monthly"


@dataclass(frozen=True)
class BudgetStatus:
    spent: float
    remaining: float
    percentage: float  # clamped to 100 for display
    status: str


@dataclass(frozen=True)
class BudgetComparison:
    category: str
    budgeted: float
    actual: float
    percentage: float  # unclamped
