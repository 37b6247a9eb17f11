"""In-memory record store for expenses and budgets."""

from dataclasses import fields, replace
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from expense_tracker.domain import Budget, BudgetInput, Expense, ExpenseInput
from expense_tracker.events import (
    BUDGET_ADDED,
    BUDGET_DELETED,
    BUDGET_UPDATED,
    EXPENSE_ADDED,
    EXPENSE_DELETED,
    EventBus,
)
from expense_tracker.logger import get_logger

logger = get_logger("store")

_BUDGET_PATCH_FIELDS = frozenset(f.name for f in fields(Budget)) - {"id"}


def _new_id() -> str:
    return uuid4().hex


class RecordStore:
    """Owns the expense and budget collections, newest first.

    Both collections are tuples and every mutation swaps in a new tuple, so
    a snapshot handed out earlier never changes. Missing ids on update or
    delete are silently ignored.

    Args:
        expenses: Initial expenses, newest first.
        budgets: Initial budgets, newest first.
        clock: Returns the timestamp stamped on new expenses.
        id_factory: Returns a fresh unique id.
        bus: Optional event bus notified after every mutation.
    """

    def __init__(
        self,
        expenses: tuple[Expense, ...] = (),
        budgets: tuple[Budget, ...] = (),
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = _new_id,
        bus: Optional[EventBus] = None,
    ):
        self._expenses = tuple(expenses)
        self._budgets = tuple(budgets)
        self.clock = clock
        self.id_factory = id_factory
        self.bus = bus
        self.last_results: list[dict] = []

    @classmethod
    def from_source(cls, source, **kwargs) -> "RecordStore":
        """Build a store seeded once from ``source.load()``."""
        expenses, budgets = source.load()
        logger.info("Seeded store with %d expenses and %d budgets", len(expenses), len(budgets))
        return cls(expenses=expenses, budgets=budgets, **kwargs)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self._expenses

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return self._budgets

    def snapshot(self) -> tuple[tuple[Expense, ...], tuple[Budget, ...]]:
        return self._expenses, self._budgets

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self._expenses if e.id == expense_id), None)

    def get_budget(self, budget_id: str) -> Optional[Budget]:
        return next((b for b in self._budgets if b.id == budget_id), None)

    def add_expense(self, data: ExpenseInput) -> Expense:
        expense = Expense(
            id=self.id_factory(),
            description=data.description,
            amount=data.amount,
            category=data.category,
            payment_method=data.payment_method,
            date=self.clock(),
        )
        self._expenses = (expense,) + self._expenses
        logger.debug("Added expense %s (%s, %.2f)", expense.id, expense.category, expense.amount)
        self._publish(EXPENSE_ADDED, {"expense": expense})
        return expense

    def delete_expense(self, expense_id: str) -> None:
        remaining = tuple(e for e in self._expenses if e.id != expense_id)
        if len(remaining) == len(self._expenses):
            logger.debug("Delete ignored, no expense %s", expense_id)
            return
        self._expenses = remaining
        logger.debug("Deleted expense %s", expense_id)
        self._publish(EXPENSE_DELETED, {"expense_id": expense_id})

    def add_budget(self, data: BudgetInput) -> Budget:
        budget = Budget(
            id=self.id_factory(),
            category=data.category,
            amount=data.amount,
            period=data.period,
        )
        self._budgets = (budget,) + self._budgets
        logger.debug("Added budget %s (%s, %.2f)", budget.id, budget.category, budget.amount)
        self._publish(BUDGET_ADDED, {"budget": budget})
        return budget

    def update_budget(self, budget_id: str, **patch) -> None:
        unknown = set(patch) - _BUDGET_PATCH_FIELDS
        if unknown:
            raise TypeError(f"Cannot update budget fields: {', '.join(sorted(unknown))}")

        updated = None
        budgets = []
        for b in self._budgets:
            if b.id == budget_id:
                b = updated = replace(b, **patch)
            budgets.append(b)
        if updated is None:
            logger.debug("Update ignored, no budget %s", budget_id)
            return
        self._budgets = tuple(budgets)
        logger.debug("Updated budget %s with %s", budget_id, patch)
        self._publish(BUDGET_UPDATED, {"budget": updated})

    def delete_budget(self, budget_id: str) -> None:
        remaining = tuple(b for b in self._budgets if b.id != budget_id)
        if len(remaining) == len(self._budgets):
            logger.debug("Delete ignored, no budget %s", budget_id)
            return
        self._budgets = remaining
        logger.debug("Deleted budget %s", budget_id)
        self._publish(BUDGET_DELETED, {"budget_id": budget_id})

    def _publish(self, name: str, payload: dict) -> None:
        if self.bus is None:
            self.last_results = []
            return
        payload = {
            **payload,
            "expenses": self._expenses,
            "budgets": self._budgets,
            "now": self.clock(),
        }
        self.last_results = self.bus.publish(name, payload)
