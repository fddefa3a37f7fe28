"""Modular Streamlit page renderers."""

from __future__ import annotations

import math

import pandas as pd
import streamlit as st

from analytics import DailySeries, weekday_frame
from metric_guide import METRIC_GUIDE
from models import AutopayRule, SavingsGoal


def _fmt_amount(value: float) -> str:
    return f"₹{value:,.2f}"


def render_totals(totals: dict[str, float], period: dict[str, float], status: str) -> None:
    st.subheader("Snapshot")
    top = st.columns(3)
    top[0].metric("Total income", _fmt_amount(totals["total_income"]))
    top[1].metric("Total expenses", _fmt_amount(totals["total_expenses"]))
    top[2].metric("Balance", _fmt_amount(totals["balance"]), f"{status} balance", delta_color="off")

    bottom = st.columns(3)
    bottom[0].metric("Spent today", _fmt_amount(period["today_total"]))
    bottom[1].metric("Spent last 7 days", _fmt_amount(period["week_total"]))
    bottom[2].metric("Spent this month", _fmt_amount(period["month_total"]))


def render_runway(runway: dict[str, object], avg_daily_spend: float) -> None:
    st.markdown("### Money runway")
    days = runway["days_remaining"]
    cols = st.columns(3)
    cols[0].metric("Days remaining", "∞" if days == math.inf else f"{int(days):,}")
    cols[1].metric("Runs out on", str(runway["depletion_date"]))
    cols[2].metric("Daily burn rate", f"{float(runway['burn_rate_pct']):.2f}%")
    st.caption(f"Based on recent average daily spending of {_fmt_amount(avg_daily_spend)}.")


def render_anomaly_alerts(alerts: pd.DataFrame) -> tuple[str, str] | None:
    """Show unapproved anomalies; return (action, transaction id) for a clicked button."""
    if alerts.empty:
        return None

    count = len(alerts)
    st.warning(f"Unusual Spending Detected ({count} Alert{'s' if count > 1 else ''})")
    st.caption(
        "The following transactions are statistically unusual compared to your "
        "typical spending in each category."
    )
    for _, row in alerts.iterrows():
        tx_id = str(row["TransactionId"])
        with st.container(border=True):
            head, amount = st.columns([3, 1])
            head.markdown(f"**{row['Category']}** · Z-score {row['ZScore']:.2f}")
            amount.markdown(f"**{_fmt_amount(float(row['Amount']))}**")
            st.caption(
                f"{pd.Timestamp(row['Date']).date().isoformat()} · "
                f"{str(row['PaymentMethod']).replace('_', ' ')} · "
                f"{row['PercentAboveMean']:.0f}% above average"
            )
            st.write(f"Description: {row['Description']}")
            st.caption(
                f"Typical {row['Category']} spending: {_fmt_amount(float(row['Mean']))} "
                f"(±{_fmt_amount(float(row['StdDev']))})"
            )
            approve_col, dismiss_col, confirm_col = st.columns(3)
            if approve_col.button("Approve (Legitimate)", key=f"approve_{tx_id}"):
                return "approve", tx_id
            confirmed = confirm_col.checkbox("Delete permanently", key=f"confirm_dismiss_{tx_id}")
            if dismiss_col.button("Dismiss", key=f"dismiss_{tx_id}", disabled=not confirmed):
                return "dismiss", tx_id
    return None


def render_recent(recent: pd.DataFrame) -> None:
    st.markdown("### Recent transactions")
    if recent.empty:
        st.info("No transactions yet. Add your first transaction to get started!")
        return
    view = recent[["Date", "Type", "Category", "Description", "Amount"]].copy()
    view["Date"] = view["Date"].dt.date
    st.dataframe(view, use_container_width=True, hide_index=True)


def render_transactions(df: pd.DataFrame) -> str | None:
    """Transaction table with a delete picker; returns the id to delete."""
    st.header("Transactions")
    if df.empty:
        st.info("No transactions found. Add your first transaction to get started!")
        return None

    view = df.copy()
    view["Date"] = view["Date"].dt.date
    st.dataframe(
        view[["Date", "Type", "Category", "Description", "PaymentMethod", "Amount", "IsAutopay"]],
        use_container_width=True,
        hide_index=True,
    )

    labels = {
        str(row["TransactionId"]): (
            f"{row['Date']} · {row['Category']} · {_fmt_amount(float(row['Amount']))}"
        )
        for _, row in view.iterrows()
    }
    with st.form(key="delete_form"):
        selected = st.selectbox("Transaction", list(labels), format_func=labels.get)
        confirmed = st.checkbox("Are you sure you want to delete this transaction?")
        submit = st.form_submit_button("Delete")
    if submit and confirmed:
        return selected
    return None


def render_budgets(budget_table: pd.DataFrame, goal: SavingsGoal, goal_stats: dict[str, float]) -> None:
    st.header("Budgets & Goal")
    st.markdown("### This month's budgets")
    if budget_table.empty:
        st.info("No budgets configured yet.")
    else:
        for _, row in budget_table.iterrows():
            st.markdown(
                f"**{row['Category']}** · {_fmt_amount(float(row['Spent']))} of "
                f"{_fmt_amount(float(row['Budget']))} · {str(row['Status']).capitalize()}"
            )
            st.progress(int(round(float(row["Percentage"]))))
        st.dataframe(budget_table, use_container_width=True, hide_index=True)

    st.markdown(f"### Savings goal: {goal.name}")
    cols = st.columns(3)
    cols[0].metric("Saved", _fmt_amount(goal_stats["saved"]))
    cols[1].metric("Target", _fmt_amount(goal_stats["target"]))
    cols[2].metric("Remaining", _fmt_amount(goal_stats["remaining"]))
    st.progress(int(round(goal_stats["percentage"])))


def render_analytics(
    series: DailySeries,
    forecast: dict[str, object],
    breakdown: pd.DataFrame,
    weekday_summary: dict[str, object],
    monthly: pd.DataFrame,
) -> None:
    st.header("Analytics")
    if series.is_empty:
        st.info("Add some expense transactions to see time series analysis.")
        return

    stats = series.stats
    cols = st.columns(4)
    cols[0].metric("Days tracked", f"{int(stats['total_days']):,}")
    cols[1].metric("Days with spending", f"{int(stats['days_with_spending']):,}")
    cols[2].metric("Avg daily spending", _fmt_amount(float(stats["average_daily_spending"])))
    cols[3].metric("Highest day", _fmt_amount(float(stats["max_spending"])))

    left, right = st.columns(2)
    with left:
        st.markdown("### Daily expenses (last 30 days)")
        st.bar_chart(series.to_frame().tail(30))
    with right:
        st.markdown("### Expenses by category")
        st.bar_chart(breakdown.set_index("Category")[["TotalAmount"]])

    st.markdown(f"### Spending forecast ({forecast['window']}-day SMA)")
    if not forecast["forecast_dates"]:
        st.info(f"Need at least {forecast['window']} days of history to forecast.")
    else:
        actual = series.to_frame().rename(columns={"Spending": "Actual"})
        predicted = pd.DataFrame(
            {"Predicted": forecast["forecast_amounts"]},
            index=pd.DatetimeIndex(pd.to_datetime(forecast["forecast_dates"]), name="Date"),
        )
        st.line_chart(pd.concat([actual, predicted]))
        f1, f2, f3 = st.columns(3)
        f1.metric("Predicted daily", _fmt_amount(float(forecast["sma_value"])))
        f2.metric(f"Next {forecast['horizon']} days", _fmt_amount(float(forecast["total_forecast"])))
        f3.metric(
            "Confidence",
            str(forecast["confidence"]).capitalize(),
            f"CV {float(forecast['coefficient_of_variation']):.1f}%",
            delta_color="off",
        )

    st.markdown("### Spending by day of week")
    if not weekday_summary["is_empty"]:
        st.bar_chart(weekday_frame(weekday_summary)[["Total"]])
        st.caption(
            f"Highest: {weekday_summary['max_day']} ({_fmt_amount(float(weekday_summary['max_amount']))}) · "
            f"Lowest: {weekday_summary['min_day']} ({_fmt_amount(float(weekday_summary['min_amount']))})"
        )

    st.markdown("### Monthly income vs expenses")
    st.bar_chart(monthly[["Income", "Expenses"]])


def render_autopays(rules: tuple[AutopayRule, ...], upcoming: pd.DataFrame) -> tuple[str, str] | None:
    """List rules with pause/delete buttons; return (action, rule id) for a click."""
    st.header("Autopay")
    st.markdown("### Upcoming this month")
    if upcoming.empty:
        st.info("No upcoming autopays this month.")
    else:
        st.dataframe(upcoming, use_container_width=True, hide_index=True)

    st.markdown("### Rules")
    if not rules:
        st.info("No autopays configured.")
        return None
    for rule in rules:
        with st.container(border=True):
            info, toggle_col, delete_col = st.columns([3, 1, 1])
            state_label = "active" if rule.is_active else "paused"
            day_label = "last day" if rule.day == "last" else f"day {rule.day}"
            info.markdown(
                f"**{rule.name}** · {_fmt_amount(float(rule.amount))} · {rule.category} "
                f"· {day_label} · {state_label}"
            )
            if toggle_col.button("Pause" if rule.is_active else "Resume", key=f"toggle_{rule.id}"):
                return "toggle", rule.id
            if delete_col.button("Delete", key=f"delete_autopay_{rule.id}"):
                return "delete", rule.id
    return None


def render_metric_guide() -> None:
    st.header("Metric Guide")
    st.caption("Definitions and formulas behind each metric.")
    st.dataframe(pd.DataFrame(METRIC_GUIDE), use_container_width=True, hide_index=True)
