"""Persistence helpers for the tracker snapshot (one JSON document per user)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from categories import empty_custom_categories
from logging_setup import get_logger
from models import TRANSACTION_TYPES, SavingsGoal, TrackerState
from validation import TransactionValidationError, make_autopay_rule, make_transaction

logger = get_logger("money_tracker.tracker_store")


def _normalize_budgets(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    out: dict[str, float] = {}
    for key, value in raw.items():
        key_text = str(key).strip()
        try:
            amount = float(value)
        except (TypeError, ValueError):
            logger.warning("Skipping budget %r with non-numeric cap %r", key, value)
            continue
        if key_text and amount >= 0:
            out[key_text] = amount
    return out


def _normalize_goal(raw: Any) -> SavingsGoal:
    if not isinstance(raw, dict):
        return SavingsGoal()
    try:
        return SavingsGoal(
            name=str(raw.get("name", "") or "").strip() or SavingsGoal.name,
            target=max(float(raw.get("target", 0) or 0), 0.0),
            saved=max(float(raw.get("saved", 0) or 0), 0.0),
        )
    except (TypeError, ValueError):
        logger.warning("Savings goal is malformed; using an empty goal")
        return SavingsGoal()


def _normalize_custom_categories(raw: Any) -> dict[str, tuple[str, ...]]:
    out = empty_custom_categories()
    if not isinstance(raw, dict):
        return out
    for tx_type in TRANSACTION_TYPES:
        values = raw.get(tx_type, [])
        if isinstance(values, list):
            out[tx_type] = tuple(str(v).strip() for v in values if str(v).strip())
    return out


def _load_transactions(raw: Any) -> tuple:
    items = raw if isinstance(raw, list) else []
    out = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            out.append(
                make_transaction(
                    tx_type=item.get("type"),
                    amount=item.get("amount"),
                    category=item.get("category"),
                    date=item.get("date"),
                    payment_method=item.get("payment_method", "cash"),
                    description=item.get("description", ""),
                    transaction_id=item.get("id"),
                    is_autopay=item.get("is_autopay", False),
                    autopay_id=item.get("autopay_id"),
                )
            )
        except TransactionValidationError as exc:
            logger.warning("Skipping stored transaction %r: %s", item.get("id"), exc)
    return tuple(out)


def _load_autopays(raw: Any) -> tuple:
    items = raw if isinstance(raw, list) else []
    out = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            out.append(
                make_autopay_rule(
                    name=item.get("name"),
                    amount=item.get("amount"),
                    category=item.get("category"),
                    day=item.get("day"),
                    description=item.get("description", ""),
                    is_active=item.get("is_active", True),
                    last_processed_month=item.get("last_processed_month"),
                    rule_id=item.get("id"),
                )
            )
        except TransactionValidationError as exc:
            logger.warning("Skipping stored autopay %r: %s", item.get("id"), exc)
    return tuple(out)


def state_from_payload(payload: dict[str, Any]) -> TrackerState:
    approved = payload.get("approved_anomalies", [])
    return TrackerState(
        transactions=_load_transactions(payload.get("transactions", [])),
        budgets=_normalize_budgets(payload.get("budgets", {})),
        savings_goal=_normalize_goal(payload.get("savings_goal", {})),
        approved_anomalies=frozenset(str(item) for item in approved) if isinstance(approved, list) else frozenset(),
        autopays=_load_autopays(payload.get("autopays", [])),
        custom_categories=_normalize_custom_categories(payload.get("custom_categories", {})),
    )


def state_to_payload(state: TrackerState) -> dict[str, Any]:
    return {
        "transactions": [tx.to_dict() for tx in state.transactions],
        "budgets": dict(state.budgets),
        "savings_goal": state.savings_goal.to_dict(),
        "approved_anomalies": sorted(state.approved_anomalies),
        "autopays": [rule.to_dict() for rule in state.autopays],
        "custom_categories": {key: list(values) for key, values in state.custom_categories.items()},
    }


def load_tracker_state(path: str) -> TrackerState:
    """Load the tracker snapshot from disk; a missing file is an empty tracker."""
    target = Path(path).expanduser()
    if not target.exists():
        logger.info("No tracker snapshot at %s; starting empty", target)
        return TrackerState()
    payload = json.loads(target.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Tracker snapshot must be a JSON object: {target}")
    state = state_from_payload(payload)
    logger.info("Loaded %d transactions from %s", len(state.transactions), target)
    return state


def save_tracker_state(path: str, state: TrackerState) -> Path:
    """Save the tracker snapshot to disk and return the saved path."""
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = state_to_payload(state)
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=True), encoding="utf-8")
    logger.info("Saved %d transactions to %s", len(state.transactions), target)
    return target
