"""Per-category Z-score spending anomalies and the approve/dismiss workflow."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

import pandas as pd

from analytics import filter_transactions
from logging_setup import get_logger
from models import EXPENSE, CommandResult, TrackerState

logger = get_logger("money_tracker.anomalies")

MIN_CATEGORY_SAMPLES = 3

ANOMALY_COLUMNS = [
    "TransactionId",
    "Date",
    "Category",
    "Amount",
    "Description",
    "PaymentMethod",
    "ZScore",
    "Mean",
    "StdDev",
    "DeviationAmount",
    "PercentAboveMean",
]


@dataclass(frozen=True)
class CategoryStats:
    count: int
    mean: float
    std_dev: float
    insufficient_data: bool


@dataclass(frozen=True)
class AnomalyReport:
    anomalies: pd.DataFrame
    category_stats: dict[str, CategoryStats] = field(default_factory=dict)
    threshold: float = 2.0

    @property
    def total_anomalies(self) -> int:
        return int(len(self.anomalies))


def _empty_anomalies() -> pd.DataFrame:
    return pd.DataFrame(columns=ANOMALY_COLUMNS)


def detect_anomalies(df: pd.DataFrame, threshold: float = 2.0) -> AnomalyReport:
    """Flag expenses more than ``threshold`` population std devs above their category mean."""
    spend = filter_transactions(df, tx_type=EXPENSE)
    if spend.empty:
        return AnomalyReport(anomalies=_empty_anomalies(), threshold=threshold)

    stats: dict[str, CategoryStats] = {}
    rows: list[dict[str, Any]] = []
    for category, group in spend.groupby("Category", sort=False):
        amounts = group["Amount"].astype(float)
        count = int(len(amounts))
        if count < MIN_CATEGORY_SAMPLES:
            stats[str(category)] = CategoryStats(count=count, mean=0.0, std_dev=0.0, insufficient_data=True)
            continue

        mean = float(amounts.mean())
        std_dev = float(amounts.std(ddof=0))
        stats[str(category)] = CategoryStats(
            count=count,
            mean=round(mean, 2),
            std_dev=round(std_dev, 2),
            insufficient_data=False,
        )
        if std_dev == 0:
            continue

        for _, row in group.iterrows():
            z_score = (float(row["Amount"]) - mean) / std_dev
            if z_score <= threshold:
                continue
            deviation = float(row["Amount"]) - mean
            rows.append(
                {
                    "TransactionId": str(row["TransactionId"]),
                    "Date": row["Date"],
                    "Category": str(category),
                    "Amount": float(row["Amount"]),
                    "Description": str(row["Description"] or "") or "No description",
                    "PaymentMethod": row["PaymentMethod"],
                    "ZScore": round(z_score, 2),
                    "Mean": round(mean, 2),
                    "StdDev": round(std_dev, 2),
                    "_RawZ": z_score,
                    "DeviationAmount": round(deviation, 2),
                    "PercentAboveMean": round(deviation / mean * 100.0, 0) if mean else 0.0,
                }
            )

    if not rows:
        return AnomalyReport(anomalies=_empty_anomalies(), category_stats=stats, threshold=threshold)

    # ZScore is rounded for display; order by the exact score.
    anomalies = (
        pd.DataFrame(rows)
        .sort_values("_RawZ", ascending=False, kind="mergesort")
        .reset_index(drop=True)[ANOMALY_COLUMNS]
    )
    logger.debug("Detected %d anomalies at threshold %.2f", len(anomalies), threshold)
    return AnomalyReport(anomalies=anomalies, category_stats=stats, threshold=threshold)


def active_alerts(report: AnomalyReport, approved_ids: Iterable[Any]) -> pd.DataFrame:
    """Anomalies the user has not approved yet."""
    approved = {str(item) for item in approved_ids}
    anomalies = report.anomalies
    if anomalies.empty:
        return anomalies.copy()
    mask = ~anomalies["TransactionId"].astype(str).isin(approved)
    return anomalies.loc[mask].reset_index(drop=True)


def approve_anomaly(state: TrackerState, transaction_id: Any) -> CommandResult:
    """Mark a transaction as legitimate so it no longer raises an alert."""
    id_str = str(transaction_id)
    if id_str in state.approved_anomalies:
        logger.info("Anomaly %s already approved", id_str)
        return CommandResult(state=state, ok=True, changed=False, message="This anomaly is already approved!")

    new_state = replace(state, approved_anomalies=state.approved_anomalies | {id_str})
    logger.info("Approved anomaly %s", id_str)
    return CommandResult(
        state=new_state,
        ok=True,
        changed=True,
        message="Anomaly marked as legitimate and approved!",
    )


def dismiss_anomaly(state: TrackerState, transaction_id: Any) -> CommandResult:
    """Permanently delete the flagged transaction and forget any approval of it."""
    id_str = str(transaction_id)
    remaining = tuple(tx for tx in state.transactions if tx.id != id_str)
    if len(remaining) == len(state.transactions):
        logger.warning("Cannot dismiss anomaly %s: transaction not found", id_str)
        return CommandResult(state=state, ok=False, changed=False, message="Error: Transaction not found")

    new_state = replace(
        state,
        transactions=remaining,
        approved_anomalies=state.approved_anomalies - {id_str},
    )
    logger.info("Dismissed anomaly %s and deleted its transaction", id_str)
    return CommandResult(
        state=new_state,
        ok=True,
        changed=True,
        message="Transaction dismissed and removed from your records!",
    )
