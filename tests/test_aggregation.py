from datetime import date, datetime

import pytest

from expense_tracker.aggregation import (
    budget_status,
    budget_vs_actual,
    category_totals,
    current_month_expenses,
    daily_series,
    is_near_limit,
    month_bounds,
    percentage_breakdown,
)
from expense_tracker.domain import Budget, Expense

NOW = datetime(2025, 3, 15, 12, 0)


def make_exp(id, amount, category="Food & Dining", when=NOW, description="Lunch"):
    return Expense(
        id=id,
        description=description,
        amount=amount,
        category=category,
        payment_method="card",
        date=when,
    )


def make_budget(amount, category="Food & Dining", id="b1", period="monthly"):
    return Budget(id=id, category=category, amount=amount, period=period)


def test_month_bounds_mid_month():
    start, end = month_bounds(NOW)
    assert start == datetime(2025, 3, 1)
    assert end == datetime(2025, 3, 31, 23, 59, 59, 999999)


def test_month_bounds_december_rolls_year():
    start, end = month_bounds(datetime(2024, 12, 31, 23, 0))
    assert start == datetime(2024, 12, 1)
    assert end == datetime(2024, 12, 31, 23, 59, 59, 999999)


def test_month_bounds_february_leap_year():
    _, end = month_bounds(datetime(2024, 2, 10))
    assert end.date() == date(2024, 2, 29)


def test_current_month_expenses_excludes_other_months():
    trans = (
        make_exp("t1", 10, when=datetime(2025, 3, 1)),
        make_exp("t2", 20, when=datetime(2025, 2, 28, 23, 59)),
        make_exp("t3", 30, when=datetime(2025, 4, 1)),
    )
    assert [e.id for e in current_month_expenses(trans, NOW)] == ["t1"]


def test_category_totals_groups_and_omits_empty_categories():
    trans = (
        make_exp("t1", 10, "Food & Dining"),
        make_exp("t2", 5, "Transportation"),
        make_exp("t3", 2.5, "Food & Dining"),
    )
    totals = category_totals(trans, datetime(2025, 3, 1), datetime(2025, 3, 31))
    assert totals == {"Food & Dining": 12.5, "Transportation": 5}
    assert "Shopping" not in totals
    assert list(totals) == ["Food & Dining", "Transportation"]


def test_category_totals_window_is_inclusive():
    start, end = datetime(2025, 3, 1), datetime(2025, 3, 10)
    trans = (
        make_exp("t1", 1, when=start),
        make_exp("t2", 2, when=end),
        make_exp("t3", 4, when=datetime(2025, 3, 10, 0, 0, 1)),
    )
    assert category_totals(trans, start, end) == {"Food & Dining": 3}


def test_category_totals_sum_matches_window_sum():
    start, end = datetime(2025, 3, 1), datetime(2025, 3, 31)
    trans = tuple(
        make_exp(f"t{i}", 1.1 * i, cat, when=datetime(2025, 2 + i % 2, 1 + i))
        for i, cat in enumerate(["Travel", "Other", "Travel", "Shopping", "Other", "Healthcare"])
    )
    totals = category_totals(trans, start, end)
    expected = sum(e.amount for e in trans if start <= e.date <= end)
    assert sum(totals.values()) == pytest.approx(expected)


def test_category_totals_does_not_mutate_input():
    trans = [make_exp("t1", 10), make_exp("t2", 20)]
    before = list(trans)
    category_totals(trans, datetime(2025, 3, 1), datetime(2025, 3, 31))
    assert trans == before


def test_percentage_breakdown_rounds_to_one_decimal():
    result = percentage_breakdown({"Travel": 1, "Other": 2}, 3)
    assert result == {"Travel": 33.3, "Other": 66.7}
    assert sum(result.values()) == pytest.approx(100, abs=0.1)


def test_percentage_breakdown_zero_total_is_zero_not_nan():
    result = percentage_breakdown({"Travel": 0.0}, 0)
    assert result == {"Travel": 0.0}
    assert percentage_breakdown({}, 0) == {}


def test_daily_series_single_expense_today():
    today = date(2025, 3, 15)
    trans = (make_exp("t1", 20, when=datetime(2025, 3, 15, 8, 30)),)
    series = daily_series(trans, 7, today)
    assert len(series) == 7
    assert [amount for _, amount in series] == [0, 0, 0, 0, 0, 0, 20]
    assert series[-1][0] == "Sat"
    assert series[0][0] == "Sun"


def test_daily_series_uses_calendar_days_not_rolling_hours():
    today = date(2025, 3, 15)
    trans = (
        make_exp("t1", 5, when=datetime(2025, 3, 14, 23, 59)),
        make_exp("t2", 7, when=datetime(2025, 3, 15, 0, 1)),
        make_exp("t3", 100, when=datetime(2025, 3, 8, 12, 0)),  # 7 days back, outside
    )
    amounts = [amount for _, amount in daily_series(trans, 7, today)]
    assert amounts[-2:] == [5, 7]
    assert sum(amounts) == 12


def test_daily_series_non_positive_days():
    assert daily_series((make_exp("t1", 1),), 0, date(2025, 3, 15)) == []


def test_budget_status_warning_scenario():
    trans = (make_exp("t1", 50), make_exp("t2", 35))
    status = budget_status(make_budget(100), trans, NOW)
    assert status.status == "warning"
    assert status.percentage == pytest.approx(85.0)
    assert status.remaining == pytest.approx(15)
    assert status.spent == pytest.approx(85)


def test_budget_status_over_scenario_clamps_display():
    trans = (make_exp("t1", 70), make_exp("t2", 50))
    status = budget_status(make_budget(100), trans, NOW)
    assert status.status == "over"
    assert status.percentage == 100
    assert status.remaining == 0
    assert status.spent == 120


def test_budget_status_exact_limit_is_warning():
    status = budget_status(make_budget(100), (make_exp("t1", 100),), NOW)
    assert status.status == "warning"


def test_budget_status_eighty_percent_is_good():
    status = budget_status(make_budget(100), (make_exp("t1", 80),), NOW)
    assert status.status == "good"


def test_budget_status_ignores_other_months_categories_and_period():
    trans = (
        make_exp("t1", 40),
        make_exp("t2", 500, when=datetime(2025, 2, 20)),
        make_exp("t3", 500, category="Travel"),
    )
    status = budget_status(make_budget(100, period="yearly"), trans, NOW)
    assert status.spent == 40
    assert status.status == "good"


def test_budget_status_zero_budget():
    assert budget_status(make_budget(0), (), NOW).status == "good"
    assert budget_status(make_budget(0), (), NOW).percentage == 0

    over = budget_status(make_budget(0), (make_exp("t1", 0.01),), NOW)
    assert over.status == "over"
    assert over.percentage == 100
    assert over.remaining == 0


def test_budget_status_is_monotonic_in_spend():
    rank = {"good": 0, "warning": 1, "over": 2}
    budget = make_budget(100)
    last_pct, last_rank = -1, -1
    for spent in [0, 10, 79.9, 80, 80.1, 95, 100, 100.5, 150, 400]:
        status = budget_status(budget, (make_exp("t1", spent),), NOW)
        assert status.percentage >= last_pct
        assert rank[status.status] >= last_rank
        last_pct, last_rank = status.percentage, rank[status.status]


def test_budget_vs_actual_keeps_order_and_duplicates():
    budgets = (
        make_budget(100, "Travel", id="b1"),
        make_budget(50, "Food & Dining", id="b2"),
        make_budget(200, "Food & Dining", id="b3"),
    )
    trans = (make_exp("t1", 60), make_exp("t2", 30, category="Travel"))
    rows = budget_vs_actual(budgets, trans, NOW)
    assert [r.category for r in rows] == ["Travel", "Food & Dining", "Food & Dining"]
    assert [r.actual for r in rows] == [30, 60, 60]
    assert rows[1].percentage == pytest.approx(120)  # unclamped
    assert rows[2].percentage == pytest.approx(30)


def test_budget_vs_actual_zero_budget_has_finite_percentage():
    rows = budget_vs_actual((make_budget(0),), (make_exp("t1", 5),), NOW)
    assert rows[0].percentage == 100.0


def test_is_near_limit_threshold():
    rows = budget_vs_actual(
        (make_budget(100, id="b1"), make_budget(1000, id="b2")), (make_exp("t1", 91),), NOW
    )
    assert is_near_limit(rows[0]) is True
    assert is_near_limit(rows[1]) is False
