import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd
import plotly.express as px

from expense_tracker.aggregation import budget_status, is_near_limit
from expense_tracker.config import settings
from expense_tracker.domain import BUDGET_PERIODS, CATEGORIES, PAYMENT_METHODS
from expense_tracker.events import create_event_bus
from expense_tracker.filtering import SORT_KEYS, expense_categories, transaction_view
from expense_tracker.functional import validate_budget_input, validate_expense_input
from expense_tracker.logger import setup_logging
from expense_tracker.seed import seed_source_from_settings
from expense_tracker.services import DashboardService
from expense_tracker.store import RecordStore

st.set_page_config(page_title="Expense Tracker", layout="wide")

logger = setup_logging(settings)
CUR = settings.currency_symbol

PAYMENT_LABELS = {
    "card": "💳 Credit Card",
    "cash": "💵 Cash",
    "bank": "🏦 Bank Transfer",
    "digital": "📱 Digital Wallet",
}
STATUS_ICONS = {"good": "✅", "warning": "⚠️", "over": "🔴"}

if "store" not in st.session_state:
    st.session_state.store = RecordStore.from_source(
        seed_source_from_settings(settings), bus=create_event_bus()
    )
if "alerts" not in st.session_state:
    st.session_state.alerts = []

store: RecordStore = st.session_state.store
expenses, budgets = store.snapshot()


def money(value: float) -> str:
    return f"{CUR}{value:,.2f}"


def expenses_df(rows) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "Date": e.date.strftime("%Y-%m-%d %H:%M"),
                "Description": e.description,
                "Category": e.category,
                "Payment": PAYMENT_LABELS.get(e.payment_method, e.payment_method),
                "Amount": e.amount,
            }
            for e in rows
        ],
        columns=["Date", "Description", "Category", "Payment", "Amount"],
    )
    return df


menu = st.sidebar.radio("Menu", ["📊 Dashboard", "➕ Add Expense", "📝 Transactions", "🎯 Budgets"])

if menu == "📊 Dashboard":
    st.title("📊 Dashboard")
    result = DashboardService().summary(expenses, budgets)["result"]

    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total Expenses", money(result["total_expenses"]))
    with k2:
        st.metric("Budget Remaining", money(result["budget_remaining"]))
    with k3:
        st.metric("Monthly Budget", money(result["total_budget"]))
    with k4:
        st.metric("Avg Daily Spend", money(result["avg_daily_spend"]))

    col_pie, col_trend = st.columns(2)
    with col_pie:
        st.subheader("Spending by Category")
        totals = result["category_totals"]
        if totals:
            df_cat = pd.DataFrame(
                {
                    "Category": list(totals),
                    "Amount": list(totals.values()),
                    "Share": [f"{result['category_percentages'][c]}%" for c in totals],
                }
            )
            fig_cat = px.pie(df_cat, values="Amount", names="Category", hole=0.4, hover_data=["Share"])
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses this month.")

    with col_trend:
        st.subheader("Weekly Spending Trend")
        df_week = pd.DataFrame(result["weekly_series"], columns=["Day", "Amount"])
        fig_week = px.area(df_week, x="Day", y="Amount")
        st.plotly_chart(fig_week, use_container_width=True)

    st.subheader("Budget vs Actual")
    if not result["budget_comparison"]:
        st.info("No budgets defined")
    for item in result["budget_comparison"]:
        label = f"{item.category}: {money(item.actual)} / {money(item.budgeted)}"
        if is_near_limit(item):
            label += " ⚠️"
        st.markdown(label)
        st.progress(min(item.percentage, 100) / 100)
        st.caption(f"{item.percentage:.1f}% used · {money(item.budgeted - item.actual)} remaining")

elif menu == "➕ Add Expense":
    st.title("➕ Add Expense")
    with st.form("expense_form", clear_on_submit=True):
        description = st.text_input("Description", placeholder="What did you spend on?")
        amount = st.text_input("Amount", placeholder="0.00")
        category = st.selectbox("Category", [""] + list(CATEGORIES))
        payment_method = st.selectbox(
            "Payment Method", PAYMENT_METHODS, format_func=lambda m: PAYMENT_LABELS[m]
        )
        submitted = st.form_submit_button("Add Expense")

    if submitted:
        checked = validate_expense_input(
            {
                "description": description,
                "amount": amount,
                "category": category,
                "payment_method": payment_method,
            }
        )
        if checked.is_left():
            st.error(checked.get_error()["message"])
        else:
            expense = store.add_expense(checked.get_value())
            st.success(f"Added {expense.description} ({money(expense.amount)})")
            for res in store.last_results:
                for alert in res.get("alerts", []):
                    st.session_state.alerts.append(alert)
                    st.warning(
                        f"{STATUS_ICONS[alert['status']]} {alert['category']}: "
                        f"{money(alert['spent'])} of {money(alert['limit'])}"
                    )

    if st.session_state.alerts:
        st.subheader("⚠️ Budget Alerts")
        for alert in reversed(st.session_state.alerts[-10:]):
            st.write(f"{STATUS_ICONS[alert['status']]} {alert['category']} is {alert['status']}")
        if st.button("Clear Alerts"):
            st.session_state.alerts = []
            st.rerun()

elif menu == "📝 Transactions":
    st.title("📝 Transactions")
    col1, col2, col3 = st.columns([3, 2, 2])
    with col1:
        search_term = st.text_input("Search transactions...")
    with col2:
        selected_category = st.selectbox("Category", [""] + expense_categories(expenses),
                                         format_func=lambda c: c or "All Categories")
    with col3:
        sort_key = st.selectbox("Sort by", SORT_KEYS, format_func=lambda k: f"Sort by {k.title()}")

    view = transaction_view(expenses, search_term, selected_category, sort_key)
    st.caption(f"{view.count} transactions • Total: {money(view.total)}")

    if view.count:
        st.dataframe(expenses_df(view.expenses), use_container_width=True)
        csv = expenses_df(view.expenses).to_csv(index=False)
        st.download_button("⬇️ Download CSV", csv, file_name="transactions.csv", mime="text/csv")

        to_delete = st.selectbox(
            "Delete transaction",
            [e.id for e in view.expenses],
            format_func=lambda i: f"{store.get_expense(i).description} ({money(store.get_expense(i).amount)})",
        )
        if st.button("🗑 Delete"):
            store.delete_expense(to_delete)
            st.rerun()
    else:
        st.info("No transactions match the selected filters")

elif menu == "🎯 Budgets":
    st.title("🎯 Budgets")

    editing_id = st.session_state.get("editing_budget")
    editing = store.get_budget(editing_id) if editing_id else None

    with st.form("budget_form", clear_on_submit=True):
        st.subheader("Edit Budget" if editing else "Add New Budget")
        options = [""] + list(CATEGORIES)
        category = st.selectbox(
            "Category", options, index=options.index(editing.category) if editing else 0
        )
        amount = st.text_input("Amount", value=str(editing.amount) if editing else "")
        period = st.selectbox(
            "Period", BUDGET_PERIODS,
            index=BUDGET_PERIODS.index(editing.period) if editing else BUDGET_PERIODS.index("monthly"),
        )
        submitted = st.form_submit_button("Update Budget" if editing else "Add Budget")

    if submitted:
        checked = validate_budget_input({"category": category, "amount": amount, "period": period})
        if checked.is_left():
            st.error(checked.get_error()["message"])
        else:
            data = checked.get_value()
            if editing:
                store.update_budget(editing.id, category=data.category, amount=data.amount, period=data.period)
                st.session_state.editing_budget = None
            else:
                store.add_budget(data)
            st.rerun()

    if editing and st.button("Cancel"):
        st.session_state.editing_budget = None
        st.rerun()

    if not budgets:
        st.info("No budgets defined")
    for b in budgets:
        status = budget_status(b, expenses)
        c1, c2, c3 = st.columns([6, 1, 1])
        with c1:
            st.markdown(f"**{b.category}** · {b.period} · {STATUS_ICONS[status.status]} {status.status}")
            st.progress(status.percentage / 100)
            st.caption(
                f"Spent {money(status.spent)} of {money(b.amount)} · {money(status.remaining)} remaining"
            )
        with c2:
            if st.button("✏️", key=f"edit_{b.id}"):
                st.session_state.editing_budget = b.id
                st.rerun()
        with c3:
            if st.button("🗑", key=f"delete_{b.id}"):
                store.delete_budget(b.id)
                st.rerun()
