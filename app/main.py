import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import datetime, time, timezone
from uuid import uuid4

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from moneyflow.config import configure_logging, get_settings
from moneyflow.demo import DemoRepository
from moneyflow.domain import BUDGET_PERIODS, INCOME, OUTCOME, Account, Budget, Category, Transaction
from moneyflow.errors import InvalidInputError, RecordNotFoundError
from moneyflow.events import BUDGET_ALERT, register_default_handlers
from moneyflow.functional import validate_date_range
from moneyflow.repository import InMemoryRepository
from moneyflow.services import DashboardService

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("moneyflow.app")

st.set_page_config(page_title="Moneyflow", layout="wide")

CURRENCY = settings.currency


def fmt(amount) -> str:
    return f"{amount:,.0f} {CURRENCY}"


def build_repository():
    if settings.demo_mode:
        repo = DemoRepository.generate()
    else:
        repo = InMemoryRepository.from_seed(str(settings.seed_path))
    register_default_handlers(repo.bus)
    repo.bus.subscribe(BUDGET_ALERT, collect_alert)
    return repo


def collect_alert(event, payload: dict) -> dict:
    st.session_state.setdefault("alerts", []).append({
        "message": payload["alert"],
        "timestamp": pd.Timestamp.now().strftime("%H:%M:%S"),
    })
    return payload


if "repository" not in st.session_state:
    st.session_state.repository = build_repository()
if "alerts" not in st.session_state:
    st.session_state.alerts = []

repo = st.session_state.repository
service = DashboardService(repo)

if settings.demo_mode:
    st.info("🧪 Demo mode: you are looking at generated data. Changes are not saved.")

# --- period filter

st.sidebar.markdown("### 📅 Period")
tokens = ["today", "week", "month", "year", "custom"]
token = st.sidebar.radio(
    "Period",
    tokens,
    index=tokens.index(settings.default_period),
    format_func=str.capitalize,
)

custom = None
if token == "custom":
    today = datetime.now(timezone.utc).date()
    start_date = st.sidebar.date_input("Start", value=today.replace(day=1), key="custom_start")
    end_date = st.sidebar.date_input("End", value=today, key="custom_end")
    checked = validate_date_range(
        datetime.combine(start_date, time.min, tzinfo=timezone.utc),
        datetime.combine(end_date, time.max, tzinfo=timezone.utc),
    )
    if checked.is_left():
        st.sidebar.error(checked.get_error()["message"])
        st.stop()
    custom = checked.get_or_else(None)

menu = st.sidebar.radio("Menu", ["🏠 Overview", "💰 Budgets", "🧾 Transactions", "🗂 Categories & Accounts"])

try:
    report = service.overview(token, custom)
except InvalidInputError as e:
    st.error(str(e))
    st.stop()

date_range = report["range"]
st.sidebar.caption(f"{date_range.start:%Y-%m-%d} → {date_range.end:%Y-%m-%d}")

if menu == "🏠 Overview":
    st.title("🏠 Overview")
    s = report["summary"]
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Income", fmt(s.total_income))
    with k2:
        st.metric("Outcome", fmt(s.total_outcome))
    with k3:
        st.metric("Net", fmt(s.net_balance))
    with k4:
        st.metric("Balance", fmt(s.account_balance))

    series = pd.DataFrame([p.to_dict() for p in report["time_series"]])
    if not series.empty:
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Scatter(x=series["date"], y=series["income"], mode="lines+markers", name="Income"))
        fig_ts.add_trace(go.Scatter(x=series["date"], y=series["outcome"], mode="lines+markers", name="Outcome"))
        fig_ts.add_trace(go.Bar(x=series["date"], y=series["net"], name="Net", opacity=0.4))
        fig_ts.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)
    else:
        st.info("No transactions in this period.")

    breakdown = pd.DataFrame([row.to_dict() for row in report["breakdown"]])
    col_out, col_in = st.columns(2)
    for col, type_, title in ((col_out, OUTCOME, "Outcome by category"), (col_in, INCOME, "Income by category")):
        with col:
            part = breakdown[breakdown["type"] == type_] if not breakdown.empty else breakdown
            if part.empty:
                st.caption(f"No {type_} data available")
                continue
            fig = px.pie(part, values="amount", names="category_name", title=title)
            fig.update_layout(height=320)
            st.plotly_chart(fig, use_container_width=True)

    insights = report["insights"]
    st.subheader("💡 Insights")
    a1, a2, a3 = st.columns(3)
    with a1:
        st.metric("Daily average", fmt(insights["averages"]["daily"]))
    with a2:
        st.metric("Weekly average", fmt(insights["averages"]["weekly"]))
    with a3:
        st.metric("Monthly average", fmt(insights["averages"]["monthly"]))

    for label, t in (("Largest outcome", insights["largest_outcome"]), ("Largest income", insights["largest_income"])):
        if t is not None:
            st.caption(f"{label}: {fmt(t.amount)} · {t.description or '-'} · {t.occurred_at:%Y-%m-%d}")

    top = insights["top_outcome"]
    if top:
        st.markdown("**Top outcome categories**")
        st.table(pd.DataFrame([
            {"#": i + 1, "Category": row.category_name, "Amount": fmt(row.amount), "Transactions": row.count}
            for i, row in enumerate(top)
        ]).set_index("#"))

elif menu == "💰 Budgets":
    st.title("💰 Budgets")
    rows = report["budgets"]
    if not rows:
        st.info("No budgets set. Create budgets to track your spending!")
    cats = {c.id: c.name for c in repo.list_categories()}
    cols = st.columns(3)
    for idx, (p, status) in enumerate(rows):
        with cols[idx % 3]:
            b = p.budget
            icon = {"over": "🔴", "warning": "🟡", "ok": "🟢"}[status]
            st.markdown(f"**{icon} {cats.get(b.category_id, 'Unknown Category')}** · {b.period} budget")
            st.progress(max(0.0, p.percentage) / 100)
            if p.is_over_budget:
                st.caption(f"{p.percentage:.1f}% of budget · Over by {fmt(abs(p.remaining))}")
            else:
                st.caption(f"{p.percentage:.1f}% of budget · {fmt(abs(p.remaining))} remaining")
            st.metric("Spent", fmt(p.spent), f"of {fmt(b.amount)}", delta_color="off")

    if st.session_state.alerts:
        st.subheader("🚨 Alerts")
        for alert in reversed(st.session_state.alerts[-10:]):
            st.warning(f"[{alert['timestamp']}] {alert['message']}")

    categories = repo.list_categories()
    outcome_cats = [c for c in categories if c.accepts(OUTCOME)]

    st.subheader("➕ New Budget")
    with st.form("budget_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            b_category = st.selectbox("Category", [c.name for c in outcome_cats])
            b_amount = st.number_input(f"Limit ({CURRENCY})", min_value=0.0, step=100000.0, format="%.0f")
        with col2:
            b_period = st.selectbox("Period", BUDGET_PERIODS, index=BUDGET_PERIODS.index("monthly"))
            b_start = st.date_input("Starts on")
        if st.form_submit_button("Create Budget") and outcome_cats:
            result = repo.create_budget(Budget(
                id=str(uuid4()),
                category_id=next(c.id for c in outcome_cats if c.name == b_category),
                amount=int(b_amount),
                currency=CURRENCY,
                period=b_period,
                start_date=datetime.combine(b_start, time.min, tzinfo=timezone.utc),
            ))
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                st.success("Budget created")
                st.rerun()

    budgets = repo.list_budgets()
    if budgets:
        st.subheader("✏️ Edit Budget")
        labels = {b.id: f"{cats.get(b.category_id, 'Unknown Category')} · {b.period} · {fmt(b.amount)}" for b in budgets}
        chosen_id = st.selectbox("Budget", list(labels), format_func=labels.get)
        chosen = next(b for b in budgets if b.id == chosen_id)
        with st.form("budget_edit_form"):
            e_amount = st.number_input(
                f"Limit ({CURRENCY})", min_value=0.0, value=float(chosen.amount), step=100000.0, format="%.0f"
            )
            e_period = st.selectbox("Period", BUDGET_PERIODS, index=BUDGET_PERIODS.index(chosen.period))
            save_col, delete_col = st.columns(2)
            with save_col:
                save = st.form_submit_button("Save")
            with delete_col:
                remove = st.form_submit_button("🗑 Delete")

        try:
            if save:
                result = repo.update_budget(chosen_id, amount=int(e_amount), period=e_period)
                if result.is_left():
                    st.error(result.get_error()["message"])
                else:
                    st.rerun()
            elif remove:
                repo.delete_budget(chosen_id)
                logger.info("deleted budget %s from the UI", chosen_id)
                st.rerun()
        except RecordNotFoundError as e:
            st.error(str(e))

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")
    accounts = repo.list_accounts()
    categories = repo.list_categories()

    st.subheader("➕ Add New Transaction")
    with st.form("input_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            occurred = st.date_input("Date")
            type_ = st.selectbox("Type", [OUTCOME, INCOME], format_func=str.capitalize)
            amount = st.number_input(f"Amount ({CURRENCY})", min_value=0.0, step=1000.0, format="%.0f")
        with col2:
            category = st.selectbox("Category", [c.name for c in categories])
            account = st.selectbox("Account", ["(none)"] + [a.name for a in accounts])
        description = st.text_input("Description (optional)")
        submitted = st.form_submit_button("Add Transaction")

        if submitted:
            new_tx = Transaction(
                id=str(uuid4()),
                type=type_,
                amount=int(amount),
                currency=CURRENCY,
                category_id=next(c.id for c in categories if c.name == category),
                account_id=next((a.id for a in accounts if a.name == account), None),
                description=description or None,
                occurred_at=datetime.combine(occurred, datetime.now(timezone.utc).time(), tzinfo=timezone.utc),
            )
            result = repo.create_transaction(new_tx)
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                st.success("Transaction added")
                st.rerun()

    in_range = repo.list_transactions(date_range)
    if in_range:
        cats = {c.id: c.name for c in categories}
        accs = {a.id: a.name for a in accounts}
        df = pd.DataFrame([
            {
                "id": t.id,
                "Date": t.occurred_at.strftime("%Y-%m-%d %H:%M"),
                "Type": t.type,
                "Amount": fmt(t.amount),
                "Category": cats.get(t.category_id, "Unknown"),
                "Account": accs.get(t.account_id, "-"),
                "Description": t.description or "",
            }
            for t in in_range
        ])
        st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)

        to_delete = st.selectbox(
            "Delete transaction",
            [""] + list(df["id"]),
            format_func=lambda tid: "" if not tid else f"{df.loc[df['id'] == tid, 'Date'].iloc[0]} · "
                                                       f"{df.loc[df['id'] == tid, 'Description'].iloc[0]}",
        )
        if to_delete and st.button("🗑 Delete"):
            repo.soft_delete_transaction(to_delete)
            logger.info("deleted transaction %s from the UI", to_delete)
            st.rerun()

        st.subheader("✏️ Edit Transaction")
        to_edit = st.selectbox(
            "Transaction",
            [t.id for t in in_range],
            format_func=lambda tid: next(
                f"{t.occurred_at:%Y-%m-%d} · {fmt(t.amount)} · {t.description or '-'}" for t in in_range if t.id == tid
            ),
        )
        current = next(t for t in in_range if t.id == to_edit)
        with st.form("edit_form"):
            e_amount = st.number_input(
                f"Amount ({CURRENCY})", min_value=0.0, value=float(current.amount), step=1000.0, format="%.0f"
            )
            cat_names = [c.name for c in categories]
            e_category = st.selectbox(
                "Category", cat_names, index=cat_names.index(cats.get(current.category_id, cat_names[0]))
            )
            e_description = st.text_input("Description", value=current.description or "")
            if st.form_submit_button("Save changes"):
                try:
                    result = repo.update_transaction(
                        to_edit,
                        amount=int(e_amount),
                        category_id=next(c.id for c in categories if c.name == e_category),
                        description=e_description or None,
                    )
                except RecordNotFoundError as e:
                    st.error(str(e))
                else:
                    if result.is_left():
                        st.error(result.get_error()["message"])
                    else:
                        st.success("Transaction updated")
                        st.rerun()
    else:
        st.info("No transactions match the selected period")

elif menu == "🗂 Categories & Accounts":
    st.title("🗂 Categories & Accounts")
    col_cat, col_acc = st.columns(2)

    with col_cat:
        st.subheader("Categories")
        st.dataframe(
            pd.DataFrame([{"Name": c.name, "Type": c.allowed_type} for c in repo.list_categories()]),
            use_container_width=True,
            hide_index=True,
        )
        with st.form("category_form", clear_on_submit=True):
            c_name = st.text_input("Name")
            c_type = st.selectbox("Used for", [OUTCOME, INCOME, "both"], format_func=str.capitalize)
            if st.form_submit_button("Add Category"):
                if not c_name.strip():
                    st.error("Category name is required")
                else:
                    repo.create_category(Category(id=str(uuid4()), name=c_name.strip(), allowed_type=c_type))
                    st.rerun()

    with col_acc:
        st.subheader("Accounts")
        st.dataframe(
            pd.DataFrame([{"Name": a.name, "Currency": a.currency} for a in repo.list_accounts()]),
            use_container_width=True,
            hide_index=True,
        )
        with st.form("account_form", clear_on_submit=True):
            a_name = st.text_input("Name")
            if st.form_submit_button("Add Account"):
                if not a_name.strip():
                    st.error("Account name is required")
                else:
                    repo.create_account(Account(id=str(uuid4()), name=a_name.strip(), currency=CURRENCY))
                    st.rerun()
