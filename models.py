"""Tracker records and the DataFrame view the analytics operate on."""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Union

import pandas as pd

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

PAYMENT_METHODS = (
    "cash",
    "credit_card",
    "debit_card",
    "upi",
    "net_banking",
    "autopay",
    "other",
)

LAST_DAY = "last"

FRAME_COLUMNS = [
    "TransactionId",
    "Type",
    "Amount",
    "Category",
    "PaymentMethod",
    "Description",
    "Date",
    "IsAutopay",
    "AutopayId",
]


def month_key(d: datetime.date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def parse_month_key(value: str) -> tuple[int, int]:
    """Accept 'YYYY-MM' only."""
    parts = str(value).split("-")
    if len(parts) != 2 or len(parts[0]) != 4 or len(parts[1]) != 2:
        raise ValueError(f"month must be in format YYYY-MM, got {value!r}")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in format YYYY-MM with MM from 01 to 12, got {value!r}")
    return year, month


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str
    amount: float
    category: str
    date: datetime.date
    payment_method: str = "cash"
    description: str = ""
    is_autopay: bool = False
    autopay_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["date"] = self.date.isoformat()
        return payload


@dataclass(frozen=True)
class SavingsGoal:
    name: str = "Savings goal"
    target: float = 0.0
    saved: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ScheduledDay = Union[int, str]


@dataclass(frozen=True)
class AutopayRule:
    id: str
    name: str
    amount: float
    category: str
    day: ScheduledDay  # 1-31 or LAST_DAY
    description: str = ""
    is_active: bool = True
    last_processed_month: str | None = None  # 'YYYY-MM'

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrackerState:
    """Snapshot of everything one user owns; commands return a new instance."""

    transactions: tuple[Transaction, ...] = ()
    budgets: dict[str, float] = field(default_factory=dict)
    savings_goal: SavingsGoal = field(default_factory=SavingsGoal)
    approved_anomalies: frozenset[str] = frozenset()
    autopays: tuple[AutopayRule, ...] = ()
    custom_categories: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {INCOME: (), EXPENSE: ()}
    )

    def find_transaction(self, transaction_id: Any) -> Transaction | None:
        id_str = str(transaction_id)
        for tx in self.transactions:
            if tx.id == id_str:
                return tx
        return None


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabular view of transactions, preserving input order."""
    rows = [
        {
            "TransactionId": tx.id,
            "Type": tx.type,
            "Amount": float(tx.amount),
            "Category": tx.category,
            "PaymentMethod": tx.payment_method,
            "Description": tx.description,
            "Date": tx.date,
            "IsAutopay": bool(tx.is_autopay),
            "AutopayId": tx.autopay_id,
        }
        for tx in transactions
    ]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame["Amount"] = pd.to_numeric(frame["Amount"], errors="coerce").fillna(0.0).astype(float)
    frame["Date"] = pd.to_datetime(frame["Date"]).dt.normalize()
    frame["IsAutopay"] = frame["IsAutopay"].astype(bool)
    return frame


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a state command; ``ok`` is False for not-found style failures."""

    state: TrackerState
    ok: bool
    changed: bool
    message: str
