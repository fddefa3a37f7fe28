"""Boundary validation: raw user input in, tracker records out."""

from __future__ import annotations

import ast
import datetime
import math
import operator
import re
import uuid
from typing import Any

from models import (
    LAST_DAY,
    PAYMENT_METHODS,
    TRANSACTION_TYPES,
    AutopayRule,
    ScheduledDay,
    Transaction,
    parse_month_key,
)

_EXPRESSION_CHARS = re.compile(r"^[0-9+\-*/.() ]+$")
_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class TransactionValidationError(ValueError):
    """Input rejected before it reaches the tracker; the message is user-facing."""


def new_record_id() -> str:
    return uuid.uuid4().hex


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(
        node.value, bool
    ):
        return float(node.value)
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise TransactionValidationError("Invalid calculation")


def parse_amount_input(value: Any) -> float:
    """Parse a positive amount, allowing simple arithmetic like '120+35.5'."""
    if isinstance(value, bool):
        raise TransactionValidationError("Please enter a valid amount!")
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value or "").strip()
        if not text:
            raise TransactionValidationError("Please enter a valid amount!")
        if not _EXPRESSION_CHARS.match(text):
            raise TransactionValidationError("Only numbers and +, -, *, / are allowed")
        try:
            amount = _eval_node(ast.parse(text, mode="eval"))
        except (SyntaxError, ZeroDivisionError, OverflowError):
            raise TransactionValidationError("Invalid calculation") from None

    if not math.isfinite(amount) or amount <= 0:
        raise TransactionValidationError("Please enter a valid amount!")
    return amount


def parse_date_input(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value or "").strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        raise TransactionValidationError(f"Date must be in format YYYY-MM-DD, got {text!r}") from None


def make_transaction(
    tx_type: str,
    amount: Any,
    category: str,
    date: Any,
    payment_method: str = "cash",
    description: str | None = "",
    transaction_id: str | None = None,
    is_autopay: bool = False,
    autopay_id: str | None = None,
) -> Transaction:
    """Validate raw transaction fields and build the record."""
    type_text = str(tx_type or "").strip().lower()
    if type_text not in TRANSACTION_TYPES:
        raise TransactionValidationError("Type must be either income or expense")
    category_text = str(category or "").strip()
    if not category_text:
        raise TransactionValidationError("Please select a category")
    method = str(payment_method or "").strip().lower()
    if method not in PAYMENT_METHODS:
        raise TransactionValidationError(
            f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}"
        )

    return Transaction(
        id=str(transaction_id) if transaction_id not in (None, "") else new_record_id(),
        type=type_text,
        amount=parse_amount_input(amount),
        category=category_text,
        date=parse_date_input(date),
        payment_method=method,
        description=str(description or "").strip(),
        is_autopay=bool(is_autopay),
        autopay_id=str(autopay_id) if autopay_id else None,
    )


def parse_scheduled_day(value: Any) -> ScheduledDay:
    if isinstance(value, str) and value.strip().lower() in (LAST_DAY, "last-day", "last_day"):
        return LAST_DAY
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise TransactionValidationError("Day must be 1-31 or 'last'") from None
    if not 1 <= day <= 31:
        raise TransactionValidationError("Day must be 1-31 or 'last'")
    return day


def make_autopay_rule(
    name: str,
    amount: Any,
    category: str,
    day: Any,
    description: str | None = "",
    is_active: bool = True,
    last_processed_month: str | None = None,
    rule_id: str | None = None,
) -> AutopayRule:
    """Validate raw autopay fields and build the rule."""
    name_text = str(name or "").strip()
    if not name_text:
        raise TransactionValidationError("Please enter a name for the autopay")
    category_text = str(category or "").strip()
    if not category_text:
        raise TransactionValidationError("Please select a category")
    if last_processed_month:
        try:
            parse_month_key(last_processed_month)
        except ValueError as exc:
            raise TransactionValidationError(str(exc)) from None

    return AutopayRule(
        id=str(rule_id) if rule_id not in (None, "") else new_record_id(),
        name=name_text,
        amount=parse_amount_input(amount),
        category=category_text,
        day=parse_scheduled_day(day),
        description=str(description or "").strip(),
        is_active=bool(is_active),
        last_processed_month=last_processed_month or None,
    )


def parse_budget_amount(value: Any) -> float:
    """Budget caps may be zero but never negative."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise TransactionValidationError("Budget must be a number") from None
    if not math.isfinite(amount) or amount < 0:
        raise TransactionValidationError("Budget must be zero or a positive amount")
    return amount
