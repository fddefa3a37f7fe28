"""MoneyTracker Streamlit entrypoint with tabbed pages."""

from __future__ import annotations

import datetime

import streamlit as st

from analytics import (
    aggregate_by_weekday,
    balance_status,
    budget_progress,
    build_daily_series,
    category_breakdown,
    goal_progress,
    ledger_totals,
    monthly_cashflow,
    period_totals,
    predict_runway,
    recent_average_daily_spend,
    recent_transactions,
    sma_forecast,
)
from anomalies import active_alerts, approve_anomaly, detect_anomalies, dismiss_anomaly
from autopay import apply_autopays, toggle_autopay, upcoming_autopays
from categories import all_categories, category_label
from commands import (
    add_autopay,
    add_custom_category,
    add_transaction,
    delete_autopay,
    delete_transaction,
    deposit_to_goal,
    remove_budget,
    set_budget,
    set_savings_goal,
)
from dashboard_views import (
    render_analytics,
    render_anomaly_alerts,
    render_autopays,
    render_budgets,
    render_metric_guide,
    render_recent,
    render_runway,
    render_totals,
    render_transactions,
)
from export import export_filename, transactions_to_csv
from logging_setup import configure_logging, get_logger
from models import EXPENSE, INCOME, LAST_DAY, PAYMENT_METHODS, CommandResult, TrackerState, transactions_frame
from settings import Settings, load_settings
from tracker_store import load_tracker_state, save_tracker_state
from validation import TransactionValidationError, make_autopay_rule, make_transaction

st.set_page_config(page_title="MoneyTracker", page_icon="\U0001f4b0", layout="wide")

logger = get_logger("money_tracker.app")


def _flash(message: str, ok: bool = True) -> None:
    st.session_state["flash"] = (message, ok)


def _show_flash() -> None:
    flash = st.session_state.pop("flash", None)
    if flash is None:
        return
    message, ok = flash
    if ok:
        st.success(message)
    else:
        st.error(message)


def _commit(settings: Settings, result: CommandResult) -> None:
    """Persist a changed state and rerun so every view sees it."""
    _flash(result.message, result.ok)
    if result.changed:
        save_tracker_state(settings.data_path, result.state)
    st.rerun()


def _load_state(settings: Settings, today: datetime.date) -> TrackerState:
    state = load_tracker_state(settings.data_path)
    processed = apply_autopays(state, today)
    if processed.changed:
        save_tracker_state(settings.data_path, processed.state)
        logger.info(processed.message)
    return processed.state


def _transaction_form(settings: Settings, state: TrackerState, today: datetime.date) -> None:
    st.header("Add Transaction")
    tx_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, format_func=str.capitalize)
    with st.form(key="transaction_form", clear_on_submit=True):
        amount = st.text_input("Amount", help="Numbers or a calculation such as 120+35.5")
        category = st.selectbox(
            "Category",
            all_categories(tx_type, state.custom_categories),
            format_func=lambda c: category_label(tx_type, c, state.custom_categories),
        )
        payment_method = st.selectbox(
            "Payment method", PAYMENT_METHODS, format_func=lambda v: v.replace("_", " ").title()
        )
        description = st.text_input("Description")
        tx_date = st.date_input("Date", value=today)
        submit = st.form_submit_button("Add")
    if submit:
        try:
            transaction = make_transaction(tx_type, amount, category, tx_date, payment_method, description)
        except TransactionValidationError as exc:
            st.error(str(exc))
        else:
            _commit(settings, add_transaction(state, transaction))

    with st.expander("Add custom category"):
        with st.form(key="category_form", clear_on_submit=True):
            name = st.text_input("Category name")
            submit_category = st.form_submit_button("Add category")
        if submit_category:
            try:
                _commit(settings, add_custom_category(state, tx_type, name))
            except TransactionValidationError as exc:
                st.error(str(exc))


def _budget_forms(settings: Settings, state: TrackerState) -> None:
    left, right = st.columns(2)
    with left, st.form(key="budget_form"):
        st.markdown("#### Set a monthly budget")
        category = st.selectbox(
            "Category",
            all_categories(EXPENSE, state.custom_categories),
            format_func=lambda c: category_label(EXPENSE, c, state.custom_categories),
        )
        cap = st.number_input("Monthly cap", min_value=0.0, step=100.0)
        submit_budget = st.form_submit_button("Save budget")
    with right, st.form(key="goal_form"):
        st.markdown("#### Savings goal")
        name = st.text_input("Goal name", value=state.savings_goal.name)
        target = st.number_input("Target", min_value=0.0, value=float(state.savings_goal.target), step=500.0)
        deposit = st.number_input("Add to goal", min_value=0.0, step=100.0)
        submit_goal = st.form_submit_button("Update goal")

    submit_remove = False
    if state.budgets:
        with left, st.form(key="remove_budget_form"):
            to_remove = st.selectbox("Budget to remove", list(state.budgets))
            submit_remove = st.form_submit_button("Remove budget")

    try:
        if submit_remove:
            _commit(settings, remove_budget(state, to_remove))
        if submit_budget:
            _commit(settings, set_budget(state, category, cap))
        if submit_goal:
            result = set_savings_goal(state, name, target)
            if deposit > 0:
                result = deposit_to_goal(result.state, deposit)
            _commit(settings, result)
    except TransactionValidationError as exc:
        st.error(str(exc))


def _autopay_form(settings: Settings, state: TrackerState) -> None:
    with st.expander("Add autopay"), st.form(key="autopay_form", clear_on_submit=True):
        name = st.text_input("Name")
        amount = st.text_input("Amount")
        category = st.selectbox(
            "Category",
            all_categories(EXPENSE, state.custom_categories),
            format_func=lambda c: category_label(EXPENSE, c, state.custom_categories),
        )
        day = st.selectbox("Day of month", [*range(1, 32), LAST_DAY])
        description = st.text_input("Description")
        submit = st.form_submit_button("Add autopay")
    if submit:
        try:
            rule = make_autopay_rule(name, amount, category, day, description)
        except TransactionValidationError as exc:
            st.error(str(exc))
        else:
            _commit(settings, add_autopay(state, rule))


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    today = datetime.date.today()

    st.title("MoneyTracker")
    _show_flash()
    state = _load_state(settings, today)
    df = transactions_frame(state.transactions)

    totals = ledger_totals(df)
    series = build_daily_series(df)
    avg_daily_spend = recent_average_daily_spend(series, today, settings.runway_lookback_days)
    report = detect_anomalies(df, threshold=settings.anomaly_threshold)

    tabs = st.tabs(["Dashboard", "Add Transaction", "Transactions", "Budgets & Goal", "Analytics", "Autopay", "Metric Guide"])

    with tabs[0]:
        render_totals(totals, period_totals(df, today), balance_status(totals["balance"]))
        action = render_anomaly_alerts(active_alerts(report, state.approved_anomalies))
        if action is not None:
            kind, tx_id = action
            _commit(settings, approve_anomaly(state, tx_id) if kind == "approve" else dismiss_anomaly(state, tx_id))
        render_runway(predict_runway(df, avg_daily_spend, today), avg_daily_spend)
        render_recent(recent_transactions(df))

    with tabs[1]:
        _transaction_form(settings, state, today)

    with tabs[2]:
        to_delete = render_transactions(df)
        if to_delete is not None:
            _commit(settings, delete_transaction(state, to_delete))
        if not df.empty:
            st.download_button(
                "Export CSV",
                data=transactions_to_csv(df),
                file_name=export_filename(today),
                mime="text/csv",
            )

    with tabs[3]:
        render_budgets(budget_progress(df, state.budgets, today), state.savings_goal, goal_progress(state.savings_goal))
        _budget_forms(settings, state)

    with tabs[4]:
        render_analytics(
            series,
            sma_forecast(series, window=settings.forecast_window, horizon=settings.forecast_horizon),
            category_breakdown(df),
            aggregate_by_weekday(df),
            monthly_cashflow(df),
        )

    with tabs[5]:
        action = render_autopays(state.autopays, upcoming_autopays(state.autopays, today))
        _autopay_form(settings, state)
        if action is not None:
            kind, rule_id = action
            _commit(settings, toggle_autopay(state, rule_id) if kind == "toggle" else delete_autopay(state, rule_id))

    with tabs[6]:
        render_metric_guide()


if __name__ == "__main__":
    main()
