"""CSV export of the transaction log."""

from __future__ import annotations

import datetime
from pathlib import Path

import pandas as pd

from logging_setup import get_logger

EXPORT_COLUMNS = {
    "Date": "Date",
    "Type": "Type",
    "Category": "Category",
    "Description": "Description",
    "PaymentMethod": "Payment Method",
    "Amount": "Amount",
}

logger = get_logger("money_tracker.export")


def export_filename(today: datetime.date) -> str:
    return f"transactions_{today.isoformat()}.csv"


def export_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Transactions in export column order, one row each, stored order kept."""
    out = df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)
    out["Date"] = pd.to_datetime(out["Date"]).dt.strftime("%Y-%m-%d")
    out["Description"] = out["Description"].fillna("").astype(str)
    return out.reset_index(drop=True)


def transactions_to_csv(df: pd.DataFrame) -> str:
    if df.empty:
        raise ValueError("No transactions to export")
    return export_frame(df).to_csv(index=False)


def export_transactions_csv(df: pd.DataFrame, output_dir: Path, today: datetime.date) -> Path:
    """Write the CSV export into ``output_dir`` and return its path."""
    payload = transactions_to_csv(df)
    output_dir = Path(output_dir).expanduser()
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(today)
    path.write_text(payload, encoding="utf-8")
    logger.info("Exported %d transactions to %s", len(df), path)
    return path
