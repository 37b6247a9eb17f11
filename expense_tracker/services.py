from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from expense_tracker.aggregation import (
    budget_status,
    budget_vs_actual,
    category_totals,
    current_month_expenses,
    daily_series,
    month_bounds,
    percentage_breakdown,
)
from expense_tracker.filtering import total

Calculator = Callable[..., Dict[str, Any]]


def calc_month_totals(expenses, budgets, now: datetime, acc: dict) -> Dict[str, Any]:
    spent = total(current_month_expenses(expenses, now))
    budgeted = sum((b.amount for b in budgets), 0.0)
    return {
        "total_expenses": spent,
        "total_budget": budgeted,
        "budget_remaining": budgeted - spent,
        "avg_daily_spend": spent / now.day,
    }


def calc_category_breakdown(expenses, budgets, now: datetime, acc: dict) -> Dict[str, Any]:
    start, end = month_bounds(now)
    totals = category_totals(expenses, start, end)
    month_total = acc.get("total_expenses", sum(totals.values()))
    return {
        "category_totals": totals,
        "category_percentages": percentage_breakdown(totals, month_total),
    }


def calc_weekly_trend(expenses, budgets, now: datetime, acc: dict) -> Dict[str, Any]:
    return {"weekly_series": daily_series(expenses, 7, now.date())}


def calc_budget_comparison(expenses, budgets, now: datetime, acc: dict) -> Dict[str, Any]:
    return {
        "budget_comparison": budget_vs_actual(budgets, expenses, now),
        "budget_statuses": {b.id: budget_status(b, expenses, now) for b in budgets},
    }


DEFAULT_CALCULATORS: tuple[Calculator, ...] = (
    calc_month_totals,
    calc_category_breakdown,
    calc_weekly_trend,
    calc_budget_comparison,
)


class DashboardService:
    """Builds the dashboard summary from a snapshot with injected calculators.

    calculators: sequence of functions taking (expenses, budgets, now, acc) -> dict.
    Each output is merged into ``acc``, so later calculators can reuse earlier
    figures. Exceptions from a calculator propagate.
    """

    def __init__(self, calculators: Sequence[Calculator] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def summary(
        self, expenses: Iterable, budgets: Iterable, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        now = now or datetime.now()
        expenses = tuple(expenses)
        budgets = tuple(budgets)
        report = {"month": now.strftime("%Y-%m"), "steps": [], "result": {}}

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(expenses, budgets, now, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report
