from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable

from expense_tracker.domain import (
    Budget,
    BudgetComparison,
    BudgetStatus,
    Expense,
    STATUS_GOOD,
    STATUS_OVER,
    STATUS_WARNING,
)

WARNING_RATIO = 0.8
NEAR_LIMIT_PERCENT = 90


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First instant and last microsecond of the calendar month containing ``now``."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - timedelta(microseconds=1)


def in_window(
    expenses: Iterable[Expense], start: datetime, end: datetime
) -> tuple[Expense, ...]:
    return tuple(e for e in expenses if start <= e.date <= end)


def current_month_expenses(
    expenses: Iterable[Expense], now: datetime | None = None
) -> tuple[Expense, ...]:
    start, end = month_bounds(now or datetime.now())
    return in_window(expenses, start, end)


def category_totals(
    expenses: Iterable[Expense], window_start: datetime, window_end: datetime
) -> dict[str, float]:
    """Sum amounts per category for expenses dated inside the inclusive window.

    Keys appear in first-seen order; categories with no expense in the
    window are left out rather than reported as zero.
    """
    totals: dict[str, float] = {}
    for e in in_window(expenses, window_start, window_end):
        totals[e.category] = totals.get(e.category, 0.0) + e.amount
    return totals


def percentage_breakdown(
    totals: dict[str, float], total_amount: float
) -> dict[str, float]:
    """Share of ``total_amount`` per category, rounded to one decimal.

    A zero total yields 0.0 for every category.
    """
    if total_amount <= 0:
        return {category: 0.0 for category in totals}
    return {
        category: round(amount / total_amount * 100, 1)
        for category, amount in totals.items()
    }


def daily_series(
    expenses: Iterable[Expense], days: int = 7, today: date | None = None
) -> list[tuple[str, float]]:
    """Per-day spend for the last ``days`` calendar days, oldest first.

    Days are matched on the local calendar date, not a rolling 24h window.
    Labels are abbreviated weekday names.
    """
    if days <= 0:
        return []
    today = today or date.today()
    if isinstance(today, datetime):
        today = today.date()

    by_day: dict[date, float] = defaultdict(float)
    for e in expenses:
        by_day[e.date.date()] += e.amount

    series = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        series.append((day.strftime("%a"), by_day.get(day, 0.0)))
    return series


def _spent_this_month(category: str, month: tuple[Expense, ...]) -> float:
    return sum(e.amount for e in month if e.category == category)


def _usage_percent(spent: float, limit: float) -> float:
    # zero limit: ratio is undefined, any spend counts as fully used
    if limit <= 0:
        return 100.0 if spent > 0 else 0.0
    return spent / limit * 100


def classify(spent: float, limit: float) -> str:
    if limit <= 0:
        return STATUS_OVER if spent > 0 else STATUS_GOOD
    ratio = spent / limit
    if ratio > 1.0:
        return STATUS_OVER
    if ratio > WARNING_RATIO:
        return STATUS_WARNING
    return STATUS_GOOD


def budget_status(
    budget: Budget, expenses: Iterable[Expense], now: datetime | None = None
) -> BudgetStatus:
    """Consumption of ``budget`` over the current calendar month.

    The declared period is not consulted. ``percentage`` is clamped to 100
    for display; ``status`` is classified on the unclamped ratio.
    """
    month = current_month_expenses(expenses, now)
    spent = _spent_this_month(budget.category, month)
    return BudgetStatus(
        spent=spent,
        remaining=max(0.0, budget.amount - spent),
        percentage=min(_usage_percent(spent, budget.amount), 100.0),
        status=classify(spent, budget.amount),
    )


def budget_vs_actual(
    budgets: Iterable[Budget], expenses: Iterable[Expense], now: datetime | None = None
) -> list[BudgetComparison]:
    month = current_month_expenses(expenses, now)
    result = []
    # one row per budget, duplicate categories included
    for b in budgets:
        actual = _spent_this_month(b.category, month)
        result.append(
            BudgetComparison(
                category=b.category,
                budgeted=b.amount,
                actual=actual,
                percentage=_usage_percent(actual, b.amount),
            )
        )
    return result


def is_near_limit(comparison: BudgetComparison) -> bool:
    return comparison.percentage > NEAR_LIMIT_PERCENT
