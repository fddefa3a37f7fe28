"""Discrete user commands over a ``TrackerState`` snapshot.

Every command returns a ``CommandResult`` holding the new state. Invalid input
raises ``TransactionValidationError``; references to missing records come back
as ``ok=False`` results instead.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from categories import add_custom_category as _append_custom_category
from logging_setup import get_logger
from models import AutopayRule, CommandResult, SavingsGoal, TrackerState, Transaction
from validation import TransactionValidationError, parse_amount_input, parse_budget_amount

logger = get_logger("money_tracker.commands")


def add_transaction(state: TrackerState, transaction: Transaction) -> CommandResult:
    if state.find_transaction(transaction.id) is not None:
        raise TransactionValidationError(f"Transaction {transaction.id} already exists")
    new_state = replace(state, transactions=(*state.transactions, transaction))
    logger.info("Added %s of %.2f in %s", transaction.type, transaction.amount, transaction.category)
    return CommandResult(state=new_state, ok=True, changed=True, message="Transaction added successfully!")


def delete_transaction(state: TrackerState, transaction_id: Any) -> CommandResult:
    id_str = str(transaction_id)
    remaining = tuple(tx for tx in state.transactions if tx.id != id_str)
    if len(remaining) == len(state.transactions):
        logger.warning("Cannot delete transaction %s: not found", id_str)
        return CommandResult(state=state, ok=False, changed=False, message="Error: Transaction not found")

    new_state = replace(
        state,
        transactions=remaining,
        approved_anomalies=state.approved_anomalies - {id_str},
    )
    logger.info("Deleted transaction %s", id_str)
    return CommandResult(state=new_state, ok=True, changed=True, message="Transaction deleted successfully!")


def set_budget(state: TrackerState, category: str, amount: Any) -> CommandResult:
    """Create or overwrite the monthly cap for ``category``."""
    name = str(category or "").strip()
    if not name:
        raise TransactionValidationError("Please select a category")
    budgets = dict(state.budgets)
    budgets[name] = parse_budget_amount(amount)
    logger.info("Budget for %s set to %.2f", name, budgets[name])
    return CommandResult(
        state=replace(state, budgets=budgets),
        ok=True,
        changed=True,
        message=f"Budget for {name} updated",
    )


def remove_budget(state: TrackerState, category: str) -> CommandResult:
    if category not in state.budgets:
        return CommandResult(state=state, ok=False, changed=False, message="Error: Budget not found")
    budgets = {key: value for key, value in state.budgets.items() if key != category}
    return CommandResult(
        state=replace(state, budgets=budgets),
        ok=True,
        changed=True,
        message=f"Budget for {category} removed",
    )


def set_savings_goal(state: TrackerState, name: str, target: Any) -> CommandResult:
    """Rename or retarget the goal; the saved amount is kept."""
    goal_name = str(name or "").strip()
    if not goal_name:
        raise TransactionValidationError("Please enter a goal name")
    goal = replace(state.savings_goal, name=goal_name, target=parse_amount_input(target))
    return CommandResult(
        state=replace(state, savings_goal=goal),
        ok=True,
        changed=True,
        message=f"Goal set to {goal_name}",
    )


def deposit_to_goal(state: TrackerState, amount: Any) -> CommandResult:
    value = parse_amount_input(amount)
    goal: SavingsGoal = state.savings_goal
    updated = replace(goal, saved=goal.saved + value)
    logger.info("Deposited %.2f to goal %s", value, goal.name)
    return CommandResult(
        state=replace(state, savings_goal=updated),
        ok=True,
        changed=True,
        message=f"Added {value:.2f} to your goal!",
    )


def add_custom_category(state: TrackerState, tx_type: str, name: str) -> CommandResult:
    custom = _append_custom_category(state.custom_categories, tx_type, name)
    return CommandResult(
        state=replace(state, custom_categories=custom),
        ok=True,
        changed=True,
        message="Custom category added successfully!",
    )


def add_autopay(state: TrackerState, rule: AutopayRule) -> CommandResult:
    if any(existing.id == rule.id for existing in state.autopays):
        raise TransactionValidationError(f"Autopay {rule.id} already exists")
    logger.info("Added autopay %s on day %s", rule.name, rule.day)
    return CommandResult(
        state=replace(state, autopays=(*state.autopays, rule)),
        ok=True,
        changed=True,
        message=f"Autopay {rule.name} added",
    )


def delete_autopay(state: TrackerState, rule_id: str) -> CommandResult:
    """Remove a rule; transactions it already generated stay."""
    rule_id = str(rule_id)
    remaining = tuple(rule for rule in state.autopays if rule.id != rule_id)
    if len(remaining) == len(state.autopays):
        logger.warning("Cannot delete autopay %s: not found", rule_id)
        return CommandResult(state=state, ok=False, changed=False, message="Error: Autopay not found")
    return CommandResult(
        state=replace(state, autopays=remaining),
        ok=True,
        changed=True,
        message="Autopay deleted",
    )
