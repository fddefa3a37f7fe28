import datetime
import json
from pathlib import Path

import pytest

from models import SavingsGoal, TrackerState, Transaction
from tracker_store import load_tracker_state, save_tracker_state
from validation import make_autopay_rule


def _state() -> TrackerState:
    return TrackerState(
        transactions=(
            Transaction(
                id="t1",
                type="expense",
                amount=42.5,
                category="Pets",
                date=datetime.date(2026, 3, 2),
                payment_method="upi",
                description="Vet",
            ),
            Transaction(
                id="autopay-gym-2026-03",
                type="expense",
                amount=50.0,
                category="Healthcare",
                date=datetime.date(2026, 3, 3),
                payment_method="autopay",
                description="Gym",
                is_autopay=True,
                autopay_id="gym",
            ),
        ),
        budgets={"Pets": 100.0},
        savings_goal=SavingsGoal(name="Bike", target=900.0, saved=150.0),
        approved_anomalies=frozenset({"t1"}),
        autopays=(make_autopay_rule("Gym", 50, "Healthcare", 3, last_processed_month="2026-03", rule_id="gym"),),
        custom_categories={"income": (), "expense": ("Pets",)},
    )


def test_tracker_state_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "tracker.json"
    state = _state()

    saved_path = save_tracker_state(str(target), state)
    loaded = load_tracker_state(str(target))

    assert saved_path == target
    assert loaded == state


def test_tracker_state_missing_file_returns_empty(tmp_path: Path) -> None:
    loaded = load_tracker_state(str(tmp_path / "missing.json"))

    assert loaded == TrackerState()


def test_tracker_state_skips_invalid_records(tmp_path: Path) -> None:
    target = tmp_path / "tracker.json"
    target.write_text(
        json.dumps(
            {
                "transactions": [
                    {"id": "ok", "type": "income", "amount": 10, "category": "Salary", "date": "2026-03-01"},
                    {"id": "bad", "type": "income", "amount": -10, "category": "Salary", "date": "2026-03-01"},
                    "not a record",
                ],
                "budgets": {"Groceries": "abc", "Travel": 50},
                "autopays": [{"id": "x", "name": "", "amount": 5, "category": "Bank Fees", "day": 1}],
            }
        ),
        encoding="utf-8",
    )

    loaded = load_tracker_state(str(target))

    assert [tx.id for tx in loaded.transactions] == ["ok"]
    assert loaded.budgets == {"Travel": 50.0}
    assert loaded.autopays == ()
    assert loaded.savings_goal == SavingsGoal()


def test_tracker_state_rejects_non_object_payload(tmp_path: Path) -> None:
    target = tmp_path / "tracker.json"
    target.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_tracker_state(str(target))
