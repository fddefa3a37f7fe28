"""Analytics helpers for the tracker dashboard: aggregates, budgets, series, forecasts."""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass, field

import pandas as pd

from logging_setup import get_logger
from models import EXPENSE, INCOME, TRANSACTION_TYPES, SavingsGoal

logger = get_logger("money_tracker.analytics")

WEEKDAY_ORDER = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

STATUS_OVER_BUDGET = "over budget"
STATUS_ALMOST_OVER = "almost over"
STATUS_WATCH = "watch"
STATUS_ON_TRACK = "on track"

CONFIDENCE_LOW = "low"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_HIGH = "high"

DEPLETED = "already depleted"
NOT_APPLICABLE = "N/A"

BUDGET_COLUMNS = ["Category", "Budget", "Spent", "Percentage", "Remaining", "Status"]
BREAKDOWN_COLUMNS = ["Category", "TotalAmount", "Count", "AvgAmount", "SharePct"]


def _as_timestamp(value) -> pd.Timestamp:
    return pd.Timestamp(value).normalize()


def filter_transactions(
    df: pd.DataFrame,
    tx_type: str | None = None,
    start_date=None,
    end_date=None,
) -> pd.DataFrame:
    """Filter by transaction type and inclusive calendar date range."""
    if tx_type is not None and tx_type not in TRANSACTION_TYPES:
        raise ValueError(f"Unsupported transaction type: {tx_type}")
    mask = pd.Series(True, index=df.index)
    if tx_type is not None:
        mask &= df["Type"] == tx_type
    if start_date is not None:
        mask &= df["Date"] >= _as_timestamp(start_date)
    if end_date is not None:
        mask &= df["Date"] <= _as_timestamp(end_date)
    return df.loc[mask].copy()


def aggregate_by_category(
    df: pd.DataFrame,
    tx_type: str | None = None,
    start_date=None,
    end_date=None,
) -> dict[str, float]:
    """Total amount per category, in first-seen order."""
    work = filter_transactions(df, tx_type=tx_type, start_date=start_date, end_date=end_date)
    if work.empty:
        return {}
    totals = work.groupby("Category", sort=False)["Amount"].sum()
    return {str(category): float(total) for category, total in totals.items()}


def ledger_totals(df: pd.DataFrame) -> dict[str, float]:
    """All-time income, expenses and net balance."""
    income = float(df.loc[df["Type"] == INCOME, "Amount"].sum())
    expenses = float(df.loc[df["Type"] == EXPENSE, "Amount"].sum())
    return {
        "total_income": income,
        "total_expenses": expenses,
        "balance": income - expenses,
    }


def period_totals(df: pd.DataFrame, today: datetime.date) -> dict[str, float]:
    """Expense totals for today, the trailing week and the current month."""
    today_ts = _as_timestamp(today)
    spend = filter_transactions(df, tx_type=EXPENSE, end_date=today_ts)
    week_start = today_ts - pd.Timedelta(days=7)
    month_start = today_ts.replace(day=1)
    return {
        "today_total": float(spend.loc[spend["Date"] == today_ts, "Amount"].sum()),
        "week_total": float(spend.loc[spend["Date"] >= week_start, "Amount"].sum()),
        "month_total": float(spend.loc[spend["Date"] >= month_start, "Amount"].sum()),
    }


def monthly_cashflow(df: pd.DataFrame) -> pd.DataFrame:
    """Aggregate income/expenses/net by calendar month."""
    if df.empty:
        return pd.DataFrame(columns=["Income", "Expenses", "Net"])
    out = df.copy()
    out["Month"] = out["Date"].dt.to_period("M").astype(str)
    out["IncomeAmount"] = out["Amount"].where(out["Type"] == INCOME, 0.0)
    out["ExpenseAmount"] = out["Amount"].where(out["Type"] == EXPENSE, 0.0)
    summary = (
        out.groupby("Month", dropna=True)
        .agg(Income=("IncomeAmount", "sum"), Expenses=("ExpenseAmount", "sum"))
        .sort_index()
    )
    summary["Net"] = summary["Income"] - summary["Expenses"]
    return summary


def budget_status(percentage: float) -> str:
    if percentage >= 100:
        return STATUS_OVER_BUDGET
    if percentage >= 90:
        return STATUS_ALMOST_OVER
    if percentage >= 70:
        return STATUS_WATCH
    return STATUS_ON_TRACK


def budget_progress(df: pd.DataFrame, budgets: dict[str, float], today: datetime.date) -> pd.DataFrame:
    """Current-month spend against each configured budget cap."""
    today_ts = _as_timestamp(today)
    spent_by_category = aggregate_by_category(
        df,
        tx_type=EXPENSE,
        start_date=today_ts.replace(day=1),
        end_date=today_ts,
    )

    rows = []
    for category, cap in budgets.items():
        cap = float(cap)
        spent = float(spent_by_category.get(category, 0.0))
        percentage = min(max(spent / cap * 100.0, 0.0), 100.0) if cap > 0 else 0.0
        rows.append(
            {
                "Category": str(category),
                "Budget": cap,
                "Spent": spent,
                "Percentage": percentage,
                "Remaining": max(cap - spent, 0.0),
                "Status": budget_status(percentage),
            }
        )
    return pd.DataFrame(rows, columns=BUDGET_COLUMNS)


def goal_progress(goal: SavingsGoal) -> dict[str, float]:
    """Progress towards the savings goal, clamped to 100%."""
    target = float(goal.target)
    saved = float(goal.saved)
    percentage = min(max(saved / target * 100.0, 0.0), 100.0) if target > 0 else 0.0
    return {
        "target": target,
        "saved": saved,
        "percentage": percentage,
        "remaining": max(target - saved, 0.0),
    }


def balance_status(balance: float) -> str:
    if balance < 1000:
        return "low"
    if balance < 5000:
        return "medium"
    return "high"


def category_breakdown(df: pd.DataFrame, start_date=None, end_date=None) -> pd.DataFrame:
    """Expense totals, counts, averages and share per category."""
    spend = filter_transactions(df, tx_type=EXPENSE, start_date=start_date, end_date=end_date)
    if spend.empty:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    out = (
        spend.groupby("Category", sort=False)
        .agg(
            TotalAmount=("Amount", "sum"),
            Count=("Amount", "size"),
            AvgAmount=("Amount", "mean"),
        )
        .reset_index()
    )
    total = float(out["TotalAmount"].sum())
    out["SharePct"] = out["TotalAmount"].apply(lambda x: (x / total * 100.0) if total else 0.0)
    out = out.sort_values("TotalAmount", ascending=False, kind="mergesort")
    return out[BREAKDOWN_COLUMNS].reset_index(drop=True)


def spending_summary(df: pd.DataFrame, start_date=None, end_date=None) -> dict[str, object]:
    """Category breakdown plus total spending for an optional date window."""
    breakdown = category_breakdown(df, start_date=start_date, end_date=end_date)
    total = float(breakdown["TotalAmount"].sum()) if not breakdown.empty else 0.0
    return {"category_breakdown": breakdown, "total_spending": total}


def recent_transactions(df: pd.DataFrame, limit: int = 5) -> pd.DataFrame:
    """Newest transactions first; same-day rows keep their stored order."""
    if df.empty:
        return df.copy()
    ordered = df.sort_values("Date", ascending=False, kind="mergesort")
    return ordered.head(int(max(limit, 0))).reset_index(drop=True)


_EMPTY_SERIES_STATS = {
    "total_days": 0,
    "days_with_spending": 0,
    "days_without_spending": 0,
    "total_spending": 0.0,
    "average_daily_spending": 0.0,
    "max_spending": 0.0,
    "min_spending": 0.0,
}


@dataclass(frozen=True)
class DailySeries:
    """Gap-filled daily expense series; ``dates`` and ``amounts`` are index-aligned."""

    dates: list[datetime.date] = field(default_factory=list)
    amounts: list[float] = field(default_factory=list)
    stats: dict[str, float] = field(default_factory=lambda: dict(_EMPTY_SERIES_STATS))

    @property
    def is_empty(self) -> bool:
        return not self.dates

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {"Spending": self.amounts},
            index=pd.DatetimeIndex(pd.to_datetime(self.dates), name="Date"),
        )


def build_daily_series(df: pd.DataFrame) -> DailySeries:
    """One expense total per calendar day from first to last expense, zeros included."""
    spend = filter_transactions(df, tx_type=EXPENSE)
    if spend.empty:
        logger.debug("No expense transactions; returning empty daily series")
        return DailySeries()

    daily = spend.groupby("Date")["Amount"].sum().sort_index()
    full_range = pd.date_range(daily.index.min(), daily.index.max(), freq="D")
    daily = daily.reindex(full_range, fill_value=0.0)

    amounts = [float(value) for value in daily.tolist()]
    non_zero = [value for value in amounts if value > 0]
    total_days = len(amounts)
    total_spending = float(sum(amounts))
    stats = {
        "total_days": total_days,
        "days_with_spending": len(non_zero),
        "days_without_spending": total_days - len(non_zero),
        "total_spending": total_spending,
        "average_daily_spending": round(total_spending / total_days, 2),
        "max_spending": max(non_zero) if non_zero else 0.0,
        "min_spending": min(non_zero) if non_zero else 0.0,
    }
    return DailySeries(
        dates=[ts.date() for ts in daily.index],
        amounts=amounts,
        stats=stats,
    )


def forecast_confidence(coefficient_of_variation: float) -> str:
    if coefficient_of_variation > 50:
        return CONFIDENCE_LOW
    if coefficient_of_variation > 30:
        return CONFIDENCE_MEDIUM
    return CONFIDENCE_HIGH


def sma_forecast(series: DailySeries, window: int = 7, horizon: int = 7) -> dict[str, object]:
    """Flat simple-moving-average forecast of the next ``horizon`` days."""
    if int(window) < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    if int(horizon) < 0:
        raise ValueError(f"horizon must be >= 0, got {horizon}")
    window = int(window)
    horizon = int(horizon)

    if len(series.amounts) < window:
        logger.debug(
            "Daily series has %d points, fewer than window %d; no forecast",
            len(series.amounts),
            window,
        )
        return {
            "forecast_dates": [],
            "forecast_amounts": [],
            "sma_value": 0.0,
            "total_forecast": 0.0,
            "confidence": CONFIDENCE_LOW,
            "coefficient_of_variation": 0.0,
            "window": window,
            "horizon": horizon,
        }

    last_window = pd.Series(series.amounts[-window:], dtype=float)
    sma_value = float(last_window.mean())
    std_dev = float(last_window.std(ddof=0))
    coefficient_of_variation = (std_dev / sma_value * 100.0) if sma_value != 0 else 0.0

    last_date = series.dates[-1]
    return {
        "forecast_dates": [last_date + datetime.timedelta(days=i) for i in range(1, horizon + 1)],
        "forecast_amounts": [round(sma_value, 2)] * horizon,
        "sma_value": round(sma_value, 2),
        "total_forecast": round(sma_value * horizon, 2),
        "confidence": forecast_confidence(coefficient_of_variation),
        "coefficient_of_variation": round(coefficient_of_variation, 2),
        "window": window,
        "horizon": horizon,
    }


def recent_average_daily_spend(series: DailySeries, today: datetime.date, lookback_days: int = 30) -> float:
    """Mean daily spend over the ``lookback_days`` ending at ``today``, zero days included.

    The window never starts before the first tracked day, so a short history is
    not diluted; spending that stopped before the window yields 0.0.
    """
    if series.is_empty:
        return 0.0
    end = _as_timestamp(today)
    start = max(
        end - pd.Timedelta(days=max(int(lookback_days), 1) - 1),
        _as_timestamp(series.dates[0]),
    )
    window = pd.date_range(start, end, freq="D")
    if window.empty:
        return 0.0
    daily = series.to_frame()["Spending"].reindex(window, fill_value=0.0)
    return float(daily.mean())


def predict_runway(df: pd.DataFrame, avg_daily_spend: float, today: datetime.date) -> dict[str, object]:
    """Days until the all-time balance runs out at ``avg_daily_spend`` per day."""
    balance = ledger_totals(df)["balance"]
    avg_daily_spend = float(avg_daily_spend)

    if balance <= 0:
        return {
            "balance": balance,
            "days_remaining": 0,
            "depletion_date": DEPLETED,
            "burn_rate_pct": 100.0,
        }
    if avg_daily_spend <= 0:
        return {
            "balance": balance,
            "days_remaining": math.inf,
            "depletion_date": NOT_APPLICABLE,
            "burn_rate_pct": 0.0,
        }

    days_remaining = math.floor(balance / avg_daily_spend)
    try:
        depletion_date: datetime.date | str = _as_timestamp(today).date() + datetime.timedelta(
            days=days_remaining
        )
    except OverflowError:
        depletion_date = NOT_APPLICABLE
    return {
        "balance": balance,
        "days_remaining": days_remaining,
        "depletion_date": depletion_date,
        "burn_rate_pct": round(avg_daily_spend / balance * 100.0, 2),
    }


def aggregate_by_weekday(df: pd.DataFrame) -> dict[str, object]:
    """Expense totals, counts and averages per weekday, Monday first."""
    totals = {day: 0.0 for day in WEEKDAY_ORDER}
    counts = {day: 0 for day in WEEKDAY_ORDER}

    spend = filter_transactions(df, tx_type=EXPENSE)
    if spend.empty:
        return {
            "totals": totals,
            "averages": {day: 0.0 for day in WEEKDAY_ORDER},
            "counts": counts,
            "total_expenses": 0.0,
            "max_day": None,
            "max_amount": 0.0,
            "min_day": None,
            "min_amount": 0.0,
            "is_empty": True,
        }

    spend["Weekday"] = spend["Date"].dt.day_name()
    grouped = spend.groupby("Weekday")["Amount"].agg(["sum", "size"])
    for day, row in grouped.iterrows():
        totals[str(day)] = float(row["sum"])
        counts[str(day)] = int(row["size"])

    averages = {
        day: round(totals[day] / counts[day], 2) if counts[day] else 0.0 for day in WEEKDAY_ORDER
    }
    max_day = max(WEEKDAY_ORDER, key=lambda day: totals[day])
    # A weekday with no transactions is never the minimum.
    active_days = [day for day in WEEKDAY_ORDER if counts[day] > 0]
    min_day = min(active_days, key=lambda day: totals[day])

    return {
        "totals": totals,
        "averages": averages,
        "counts": counts,
        "total_expenses": round(sum(totals.values()), 2),
        "max_day": max_day,
        "max_amount": totals[max_day],
        "min_day": min_day,
        "min_amount": totals[min_day],
        "is_empty": False,
    }


def weekday_frame(summary: dict[str, object]) -> pd.DataFrame:
    """Weekday summary as a Monday..Sunday table for charts."""
    return pd.DataFrame(
        {
            "Total": pd.Series(summary["totals"]),
            "Average": pd.Series(summary["averages"]),
            "Transactions": pd.Series(summary["counts"]),
        }
    ).reindex(WEEKDAY_ORDER)
