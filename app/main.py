import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import pandas as pd
import streamlit as st

from expense_tracker.aggregator import daily_series, monthly_summary, summarize
from expense_tracker.alerts import BUDGET_ALERT, BudgetAlertMonitor, EventBus
from expense_tracker.budgets import categories_without_budget
from expense_tracker.charts import bucket_bar, category_pie, daily_bar
from expense_tracker.domain import Category, Priority, TransactionType
from expense_tracker.errors import BudgetConfigurationError, EmptyReportError, ValidationError
from expense_tracker.exports import ensure_exportable, export_filename, report_filename, report_to_csv, transactions_to_csv
from expense_tracker.periods import month_name
from expense_tracker.services import BudgetService, LedgerService, ReportService
from expense_tracker.settings import get_settings
from expense_tracker.storage import JsonStorage
from expense_tracker.transforms import search_transactions, sort_transactions, total_pending_amount
from expense_tracker.utils import format_currency

st.set_page_config(page_title="Expense Tracker", layout="wide")

settings = get_settings()
storage = JsonStorage(settings.data_dir)
ledger = LedgerService(storage)
budget_service = BudgetService(storage)
report_service = ReportService(storage)

st.sidebar.markdown("### 👤 Profile")
owner_id = st.sidebar.text_input("User", value=st.session_state.get("owner_id", settings.default_owner))
st.session_state["owner_id"] = owner_id
today = date.today()


def show_notification(event, payload: dict) -> dict:
    icon = "🚨" if payload["severity"] == "error" else "⚠️"
    st.toast(f"**{payload['title']}** {payload['message']}", icon=icon)
    return payload


if "alert_monitor" not in st.session_state:
    bus = EventBus()
    bus.subscribe(BUDGET_ALERT, show_notification)
    st.session_state.alert_monitor = BudgetAlertMonitor(bus)

transactions = ledger.transactions(owner_id)

try:
    st.session_state.alert_monitor.check(budget_service.statuses(owner_id, today))
except BudgetConfigurationError as e:
    st.sidebar.error(str(e))

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "💰 Budgets", "📑 Reports", "✅ Todos"]
)

if menu == "🏠 Overview":
    st.title("🏠 Overview")
    totals = summarize(transactions)
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Balance", format_currency(totals.balance))
    with k2:
        st.metric("Total Income", format_currency(totals.total_income))
    with k3:
        st.metric("Total Expenses", format_currency(totals.total_expense))

    st.subheader("📅 Monthly Summary")
    c1, c2 = st.columns(2)
    with c1:
        month = st.selectbox("Month", list(range(1, 13)), index=today.month - 1,
                             format_func=month_name)
    with c2:
        years = list(range(today.year - 3, today.year + 3))
        year = st.selectbox("Year", years, index=3)
    month_totals = monthly_summary(transactions, month, year)
    m1, m2, m3 = st.columns(3)
    m1.metric("Income", format_currency(month_totals.total_income))
    m2.metric("Expenses", format_currency(month_totals.total_expense))
    m3.metric("Balance", format_currency(month_totals.balance))

    monthly = report_service.report(owner_id, "monthly", date(year, month, 1))
    if monthly.is_empty:
        st.info(f"No transactions for {monthly.period_label}")
    else:
        left, right = st.columns(2)
        with left:
            if monthly.category_breakdown:
                st.plotly_chart(category_pie(monthly.category_breakdown), use_container_width=True)
        with right:
            st.plotly_chart(daily_bar(daily_series(transactions, today)), use_container_width=True)

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.form("transaction_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            title = st.text_input("Title")
            amount = st.number_input("Amount", min_value=0.0, step=100.0, format="%.2f")
            on = st.date_input("Date", value=today)
        with col2:
            tx_type = st.selectbox("Type", [t.value for t in TransactionType], index=1)
            category = st.selectbox("Category", [c.value for c in Category])
        if st.form_submit_button("Add Transaction"):
            try:
                ledger.add_transaction(owner_id, title, amount, on, tx_type, category)
                st.success("Transaction added")
                st.rerun()
            except ValidationError as e:
                st.error(str(e))

    f1, f2, f3 = st.columns(3)
    with f1:
        search = st.text_input("Search title")
    with f2:
        cat_filter = st.selectbox("Category filter", ["all"] + [c.value for c in Category])
    with f3:
        sort_by = st.selectbox("Sort", ["date-desc", "date-asc", "amount-desc", "amount-asc"])

    shown = sort_transactions(
        search_transactions(transactions, search, None if cat_filter == "all" else Category(cat_filter)),
        sort_by,
    )
    if shown:
        table = pd.DataFrame([
            {"Date": t.date.isoformat(), "Title": t.title, "Category": t.category.value,
             "Type": t.type.value.capitalize(), "Amount": format_currency(t.amount), "id": t.id}
            for t in shown
        ])
        st.dataframe(table.drop(columns=["id"]), use_container_width=True, hide_index=True)
        st.download_button("⬇ Download CSV", transactions_to_csv(shown),
                           file_name=export_filename("expenses", today), mime="text/csv")
        to_delete = st.selectbox("Delete transaction", [""] + [t.id for t in shown],
                                 format_func=lambda i: next((f"{t.date} {t.title}" for t in shown if t.id == i), ""))
        if to_delete and st.button("🗑 Delete"):
            ledger.delete_transaction(to_delete)
            st.rerun()
    else:
        st.info("No transactions match the selected filters")

elif menu == "💰 Budgets":
    st.title("💰 Category Budgets")
    month, year = today.month, today.year
    budgets = budget_service.budgets(owner_id, month, year)

    with st.form("budget_form", clear_on_submit=True):
        free = [c.value for c in categories_without_budget(budgets)] or [c.value for c in Category]
        category = st.selectbox("Category", free)
        limit = st.number_input("Monthly limit", min_value=0.0, step=500.0)
        if st.form_submit_button("Save Budget"):
            try:
                budget_service.set_budget(owner_id, category, limit, month, year)
                st.rerun()
            except ValidationError as e:
                st.error(str(e))

    try:
        statuses = budget_service.statuses(owner_id, today)
    except BudgetConfigurationError as e:
        st.error(str(e))
        statuses = []

    if not statuses:
        st.info("No budgets set for this month")
    for status in statuses:
        label = "🔴 Over" if status.is_over_budget else ("🟠 Near" if status.is_near_budget else "🟢 OK")
        st.metric(
            f"{status.category.value} ({label})",
            f"{format_currency(status.spent)} / {format_currency(status.limit)}",
            f"{format_currency(status.remaining)} remaining",
        )
        st.progress(min(100, int(status.percentage_used)) / 100)
        if st.button(f"Remove {status.category.value} budget", key=f"rm_{status.category.value}"):
            budget_service.remove_budget(owner_id, status.category, month, year)
            st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")
    reports = report_service.standard_reports(owner_id, today)
    tabs = st.tabs(["Weekly", "Monthly", "Yearly", "Custom"])

    def render(report, key):
        st.caption(f"{report.title}: {report.period_label}")
        r1, r2, r3 = st.columns(3)
        r1.metric("Income", format_currency(report.total_income))
        r2.metric("Expense", format_currency(report.total_expense))
        r3.metric("Balance", format_currency(report.balance))
        if report.bucket_breakdown:
            st.plotly_chart(bucket_bar(report.bucket_breakdown), use_container_width=True, key=f"bar_{key}")
        if report.category_breakdown:
            st.plotly_chart(category_pie(report.category_breakdown), use_container_width=True, key=f"pie_{key}")
        try:
            csv = report_to_csv(ensure_exportable(report))
            st.download_button("⬇ Download report", csv, file_name=report_filename(report, today),
                               mime="text/csv", key=f"dl_{key}")
        except EmptyReportError as e:
            st.info(str(e))

    for tab, name in zip(tabs[:3], ["weekly", "monthly", "yearly"]):
        with tab:
            render(reports[name], name)
    with tabs[3]:
        start = st.date_input("Start date", value=today.replace(day=1), max_value=today)
        end = st.date_input("End date", value=today, min_value=start)
        render(report_service.custom_report(owner_id, start, end), "custom")

elif menu == "✅ Todos":
    st.title("✅ Financial Todos")
    todos = ledger.todos(owner_id)
    st.caption(f"{sum(t.completed for t in todos)} of {len(todos)} done · "
               f"{format_currency(total_pending_amount(todos))} pending")

    with st.form("todo_form", clear_on_submit=True):
        title = st.text_input("Title")
        description = st.text_area("Description")
        c1, c2, c3 = st.columns(3)
        with c1:
            priority = st.selectbox("Priority", [p.value for p in Priority], index=1)
        with c2:
            amount = st.number_input("Amount (optional)", min_value=0.0, step=100.0)
        with c3:
            due = st.date_input("Due date", value=None)
        if st.form_submit_button("Add Todo"):
            try:
                ledger.add_todo(owner_id, title, priority=priority, description=description,
                                amount=amount or None, due_date=due)
                st.rerun()
            except ValidationError as e:
                st.error(str(e))

    for todo in todos:
        c1, c2 = st.columns([6, 1])
        with c1:
            done = st.checkbox(
                f"[{todo.priority.value}] {todo.title}"
                + (f" · {format_currency(todo.amount)}" if todo.amount else "")
                + (f" · due {todo.due_date}" if todo.due_date else ""),
                value=todo.completed, key=f"todo_{todo.id}",
            )
            if done != todo.completed:
                ledger.toggle_todo(owner_id, todo.id)
                st.rerun()
        with c2:
            if st.button("🗑", key=f"del_{todo.id}"):
                ledger.delete_todo(todo.id)
                st.rerun()
