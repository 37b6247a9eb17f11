"""Sources for the initial expense and budget corpus.

The store is seeded once at start-up from any object with a ``load()``
method returning ``(expenses, budgets)``. The mock generator gives the demo
data; tests use ``StaticSeed`` or a seeded generator.
"""

import json
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Protocol

from expense_tracker.config import Settings
from expense_tracker.domain import CATEGORIES, PAYMENT_METHODS, Budget, Expense

SeedData = tuple[tuple[Expense, ...], tuple[Budget, ...]]

EXPENSE_DESCRIPTIONS = {
    "Food & Dining": ["Starbucks Coffee", "Lunch at Subway", "Grocery Shopping", "Pizza Delivery", "Restaurant Dinner"],
    "Transportation": ["Gas Station", "Uber Ride", "Bus Ticket", "Parking Fee", "Car Maintenance"],
    "Shopping": ["Amazon Purchase", "Clothing Store", "Electronics", "Home Supplies", "Books"],
    "Entertainment": ["Movie Tickets", "Concert", "Streaming Service", "Gaming", "Sports Event"],
    "Bills & Utilities": ["Electric Bill", "Internet Bill", "Phone Bill", "Water Bill", "Insurance"],
    "Healthcare": ["Doctor Visit", "Pharmacy", "Dental Care", "Health Insurance", "Vitamins"],
    "Travel": ["Hotel Booking", "Flight Ticket", "Car Rental", "Travel Insurance", "Vacation"],
    "Education": ["Course Fee", "Books", "Online Learning", "Workshop", "Certification"],
    "Other": ["Gift", "Donation", "Miscellaneous", "Emergency", "Investment"],
}

DEFAULT_BUDGETS = (
    Budget(id="budget-1", category="Food & Dining", amount=500, period="monthly"),
    Budget(id="budget-2", category="Transportation", amount=200, period="monthly"),
    Budget(id="budget-3", category="Shopping", amount=300, period="monthly"),
    Budget(id="budget-4", category="Entertainment", amount=150, period="monthly"),
    Budget(id="budget-5", category="Bills & Utilities", amount=400, period="monthly"),
)


class SeedSource(Protocol):
    def load(self) -> SeedData:
        ...


class StaticSeed:
    def __init__(self, expenses=(), budgets=()):
        self.expenses = tuple(expenses)
        self.budgets = tuple(budgets)

    def load(self) -> SeedData:
        return self.expenses, self.budgets


class MockDataGenerator:
    """Random demo corpus: ``count`` expenses spread over the last ``days`` days.

    Pass a seeded ``random.Random`` (or a fixed ``now``) for repeatable output.
    """

    def __init__(
        self,
        count: int = 50,
        days: int = 30,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
    ):
        self.count = count
        self.days = days
        self.rng = rng or random.Random()
        self.now = now

    def _expense(self, i: int, now: datetime) -> Expense:
        category = self.rng.choice(CATEGORIES)
        return Expense(
            id=f"expense-{i}",
            description=self.rng.choice(EXPENSE_DESCRIPTIONS[category]),
            amount=round(self.rng.random() * 200 + 5, 2),
            category=category,
            payment_method=self.rng.choice(PAYMENT_METHODS),
            date=now - timedelta(days=self.rng.randrange(self.days)),
        )

    def load(self) -> SeedData:
        now = self.now or datetime.now()
        expenses = tuple(self._expense(i, now) for i in range(self.count))
        return expenses, DEFAULT_BUDGETS


def _parse_date(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    # stored dates are local naive times, comparable with datetime.now()
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _expense_from_dict(d: dict) -> Expense:
    return Expense(
        id=str(d["id"]),
        description=d["description"],
        amount=float(d["amount"]),
        category=d["category"],
        payment_method=d.get("payment_method") or d.get("paymentMethod") or "card",
        date=_parse_date(d["date"]),
    )


def _budget_from_dict(d: dict) -> Budget:
    return Budget(
        id=str(d["id"]),
        category=d["category"],
        amount=float(d["amount"]),
        period=d.get("period", "monthly"),
    )


class JsonSeedLoader:
    """Reads ``{"expenses": [...], "budgets": [...]}`` from a JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> SeedData:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        expenses = tuple(_expense_from_dict(e) for e in data.get("expenses", []))
        budgets = tuple(_budget_from_dict(b) for b in data.get("budgets", []))
        return expenses, budgets


def seed_source_from_settings(settings: Settings) -> SeedSource:
    if settings.seed_path:
        return JsonSeedLoader(settings.seed_path)
    return MockDataGenerator(
        count=settings.mock_expense_count,
        days=settings.mock_history_days,
        rng=random.Random(settings.mock_seed),
    )
