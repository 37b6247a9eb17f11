from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from expense_tracker.domain import (
    BUDGET_PERIODS,
    CATEGORIES,
    PAYMENT_METHODS,
    BudgetInput,
    ExpenseInput,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_value(self) -> T:
        return self._value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def is_right(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def get_value(self) -> T:
        raise ValueError(f"Cannot get value from Left: {self._error}")

    def get_error(self) -> E:
        return self._error

    def is_right(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _error(code: str, field: str, message: str) -> Left:
    return Left({"error": code, "field": field, "message": message})


def _require_text(data: dict, field: str) -> Either[dict, str]:
    value = data.get(field)
    if value is None or not str(value).strip():
        return _error("missing_field", field, f"{field} is required")
    return Right(str(value).strip())


def _parse_amount(data: dict) -> Either[dict, float]:
    raw: Any = data.get("amount")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return _error("missing_field", "amount", "amount is required")
    if isinstance(raw, bool):
        return _error("invalid_amount", "amount", f"amount must be a number, got {raw!r}")
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return _error("invalid_amount", "amount", f"amount must be a number, got {raw!r}")
    if amount != amount or amount in (float("inf"), float("-inf")):
        return _error("invalid_amount", "amount", f"amount must be finite, got {raw!r}")
    if amount < 0:
        return _error("negative_amount", "amount", "amount cannot be negative")
    return Right(amount)


def _one_of(value: str, allowed: tuple[str, ...], code: str, field: str) -> Either[dict, str]:
    if value not in allowed:
        return _error(code, field, f"{value!r} is not one of: {', '.join(allowed)}")
    return Right(value)


def validate_expense_input(data: dict) -> Either[dict, ExpenseInput]:
    """Check raw form data for a new expense.

    Returns ``Right(ExpenseInput)`` or ``Left`` with the first problem found.
    """
    return _require_text(data, "description").bind(
        lambda description: _parse_amount(data).bind(
            lambda amount: _require_text(data, "category")
            .bind(lambda c: _one_of(c, CATEGORIES, "unknown_category", "category"))
            .bind(
                lambda category: _one_of(
                    data.get("payment_method") or data.get("paymentMethod") or "card",
                    PAYMENT_METHODS,
                    "unknown_payment_method",
                    "payment_method",
                ).map(
                    lambda method: ExpenseInput(
                        description=description,
                        amount=amount,
                        category=category,
                        payment_method=method,
                    )
                )
            )
        )
    )


def validate_budget_input(data: dict) -> Either[dict, BudgetInput]:
    """Check raw form data for a budget; also used for edits."""
    return (
        _require_text(data, "category")
        .bind(lambda c: _one_of(c, CATEGORIES, "unknown_category", "category"))
        .bind(
            lambda category: _parse_amount(data).bind(
                lambda amount: _one_of(
                    data.get("period") or "monthly", BUDGET_PERIODS, "unknown_period", "period"
                ).map(lambda period: BudgetInput(category=category, amount=amount, period=period))
            )
        )
    )
