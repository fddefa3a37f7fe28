"""Recurring autopay rules: at most one generated expense per rule per calendar month."""

from __future__ import annotations

import calendar
import datetime
from dataclasses import replace
from typing import Iterable

import pandas as pd

from logging_setup import get_logger
from models import (
    EXPENSE,
    LAST_DAY,
    AutopayRule,
    CommandResult,
    ScheduledDay,
    TrackerState,
    Transaction,
    month_key,
)

logger = get_logger("money_tracker.autopay")

UPCOMING_COLUMNS = ["AutopayId", "Name", "Amount", "Category", "ScheduledDay", "ScheduledDate"]


def resolve_scheduled_day(day: ScheduledDay, year: int, month: int) -> int:
    """Concrete day of month; 'last' and days past month end map to the last day."""
    last_day = calendar.monthrange(year, month)[1]
    if day == LAST_DAY:
        return last_day
    return min(int(day), last_day)


def autopay_transaction_id(rule_id: str, month: str) -> str:
    return f"autopay-{rule_id}-{month}"


def process_autopays(
    autopays: Iterable[AutopayRule],
    transactions: Iterable[Transaction],
    today: datetime.date,
) -> tuple[list[Transaction], list[AutopayRule]]:
    """Materialize due autopays for the month of ``today``.

    Returns the newly generated transactions and the full rule list with
    ``last_processed_month`` updated for every rule handled this month.
    """
    current_month = month_key(today)
    generated_this_month = {
        tx.autopay_id
        for tx in transactions
        if tx.is_autopay and tx.autopay_id and month_key(tx.date) == current_month
    }

    new_transactions: list[Transaction] = []
    updated: list[AutopayRule] = []
    for rule in autopays:
        if not rule.is_active or rule.last_processed_month == current_month:
            updated.append(rule)
            continue

        if rule.id in generated_this_month:
            updated.append(replace(rule, last_processed_month=current_month))
            continue

        scheduled_day = resolve_scheduled_day(rule.day, today.year, today.month)
        if today.day < scheduled_day:
            updated.append(rule)
            continue

        new_transactions.append(
            Transaction(
                id=autopay_transaction_id(rule.id, current_month),
                type=EXPENSE,
                amount=float(rule.amount),
                category=rule.category,
                date=datetime.date(today.year, today.month, scheduled_day),
                payment_method="autopay",
                description=rule.description or rule.name,
                is_autopay=True,
                autopay_id=rule.id,
            )
        )
        updated.append(replace(rule, last_processed_month=current_month))
        logger.info("Generated autopay %s for %s", rule.name, current_month)

    return new_transactions, updated


def upcoming_autopays(autopays: Iterable[AutopayRule], today: datetime.date) -> pd.DataFrame:
    """Active rules not yet processed this month whose day is still ahead."""
    current_month = month_key(today)
    rows = []
    for rule in autopays:
        if not rule.is_active or rule.last_processed_month == current_month:
            continue
        scheduled_day = resolve_scheduled_day(rule.day, today.year, today.month)
        if today.day >= scheduled_day:
            continue
        rows.append(
            {
                "AutopayId": rule.id,
                "Name": rule.name,
                "Amount": float(rule.amount),
                "Category": rule.category,
                "ScheduledDay": scheduled_day,
                "ScheduledDate": datetime.date(today.year, today.month, scheduled_day),
            }
        )
    if not rows:
        return pd.DataFrame(columns=UPCOMING_COLUMNS)
    out = pd.DataFrame(rows, columns=UPCOMING_COLUMNS)
    return out.sort_values("ScheduledDay", kind="mergesort").reset_index(drop=True)


def apply_autopays(state: TrackerState, today: datetime.date) -> CommandResult:
    """Run the processor against a snapshot and fold the results back in."""
    new_transactions, updated = process_autopays(state.autopays, state.transactions, today)
    changed = bool(new_transactions) or tuple(updated) != state.autopays
    if not changed:
        return CommandResult(state=state, ok=True, changed=False, message="No autopays due")

    new_state = replace(
        state,
        transactions=(*state.transactions, *new_transactions),
        autopays=tuple(updated),
    )
    return CommandResult(
        state=new_state,
        ok=True,
        changed=True,
        message=f"Processed {len(new_transactions)} autopay(s)",
    )


def toggle_autopay(state: TrackerState, rule_id: str) -> CommandResult:
    """Pause an active rule or resume a paused one."""
    rule_id = str(rule_id)
    for idx, rule in enumerate(state.autopays):
        if rule.id != rule_id:
            continue
        toggled = replace(rule, is_active=not rule.is_active)
        autopays = (*state.autopays[:idx], toggled, *state.autopays[idx + 1 :])
        label = "resumed" if toggled.is_active else "paused"
        logger.info("Autopay %s %s", rule.name, label)
        return CommandResult(
            state=replace(state, autopays=autopays),
            ok=True,
            changed=True,
            message=f"Autopay {rule.name} {label}",
        )

    logger.warning("Cannot toggle autopay %s: rule not found", rule_id)
    return CommandResult(state=state, ok=False, changed=False, message="Error: Autopay not found")
