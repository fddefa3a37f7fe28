import datetime

import pytest

from models import LAST_DAY
from validation import (
    TransactionValidationError,
    make_autopay_rule,
    make_transaction,
    parse_amount_input,
    parse_budget_amount,
    parse_date_input,
    parse_scheduled_day,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("120+35.5", 155.5), ("2*(3+4)", 14.0), (" 100 / 4 ", 25.0), ("-5+10", 5.0), (12, 12.0)],
)
def test_parse_amount_input_evaluates_arithmetic(raw, expected) -> None:
    assert parse_amount_input(raw) == expected


@pytest.mark.parametrize("raw", ["", "0", "5-5", "-3", None, True, float("nan")])
def test_parse_amount_input_rejects_non_positive(raw) -> None:
    with pytest.raises(TransactionValidationError, match="valid amount"):
        parse_amount_input(raw)


def test_parse_amount_input_rejects_letters() -> None:
    with pytest.raises(TransactionValidationError, match="Only numbers"):
        parse_amount_input("__import__('os')")


@pytest.mark.parametrize("raw", ["10/0", "5+", "2**3", "(1"])
def test_parse_amount_input_rejects_bad_calculation(raw) -> None:
    with pytest.raises(TransactionValidationError, match="Invalid calculation"):
        parse_amount_input(raw)


def test_parse_date_input_accepts_dates_and_iso_text() -> None:
    assert parse_date_input("2026-03-02") == datetime.date(2026, 3, 2)
    assert parse_date_input(datetime.datetime(2026, 3, 2, 18, 30)) == datetime.date(2026, 3, 2)
    with pytest.raises(TransactionValidationError):
        parse_date_input("02/03/2026")


def test_make_transaction_normalizes_fields() -> None:
    tx = make_transaction(" Expense ", "10+5", " Groceries ", "2026-03-02", "UPI", "  Veg  ")

    assert tx.type == "expense"
    assert tx.amount == 15.0
    assert tx.category == "Groceries"
    assert tx.payment_method == "upi"
    assert tx.description == "Veg"
    assert len(tx.id) == 32


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"tx_type": "transfer"}, "income or expense"),
        ({"category": " "}, "select a category"),
        ({"payment_method": "cheque"}, "Payment method"),
    ],
)
def test_make_transaction_rejects_bad_fields(kwargs, message) -> None:
    fields = {"tx_type": "expense", "amount": 10, "category": "Groceries", "date": "2026-03-02"}
    fields.update(kwargs)

    with pytest.raises(TransactionValidationError, match=message):
        make_transaction(**fields)


def test_parse_scheduled_day() -> None:
    assert parse_scheduled_day("last-day") == LAST_DAY
    assert parse_scheduled_day("31") == 31
    for bad in (0, 32, "soon"):
        with pytest.raises(TransactionValidationError):
            parse_scheduled_day(bad)


def test_make_autopay_rule_validates_month_key() -> None:
    rule = make_autopay_rule("Rent", "15000", "Rent/Mortgage", "last", last_processed_month="2026-03")

    assert rule.day == LAST_DAY
    assert rule.is_active
    with pytest.raises(TransactionValidationError):
        make_autopay_rule("Rent", "15000", "Rent/Mortgage", 1, last_processed_month="2026-13")
    with pytest.raises(TransactionValidationError, match="name"):
        make_autopay_rule("", "15000", "Rent/Mortgage", 1)


def test_parse_budget_amount() -> None:
    assert parse_budget_amount("0") == 0.0
    with pytest.raises(TransactionValidationError):
        parse_budget_amount("-10")
    with pytest.raises(TransactionValidationError):
        parse_budget_amount("lots")
