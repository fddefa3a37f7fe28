import pytest

from categories import (
    DEFAULT_CATEGORIES,
    add_custom_category,
    all_categories,
    category_label,
    empty_custom_categories,
    is_custom_category,
)
from validation import TransactionValidationError


def test_all_categories_appends_custom_after_defaults() -> None:
    custom = add_custom_category(empty_custom_categories(), "income", "Dividends")

    out = all_categories("income", custom)

    assert out[: len(DEFAULT_CATEGORIES["income"])] == list(DEFAULT_CATEGORIES["income"])
    assert out[-1] == "Dividends"
    assert "Dividends" not in all_categories("expense", custom)
    assert is_custom_category("income", "Dividends", custom)
    assert not is_custom_category("income", "Salary", custom)


def test_add_custom_category_does_not_mutate_input() -> None:
    original = empty_custom_categories()

    add_custom_category(original, "expense", "Pets")

    assert original["expense"] == ()


def test_add_custom_category_rejects_defaults_and_blanks() -> None:
    with pytest.raises(TransactionValidationError, match="Category already exists"):
        add_custom_category(None, "expense", "Groceries")
    with pytest.raises(TransactionValidationError, match="category name"):
        add_custom_category(None, "expense", "   ")
    with pytest.raises(TransactionValidationError):
        add_custom_category(None, "transfer", "Moves")


def test_all_categories_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        all_categories("transfer")


def test_category_label_marks_custom_categories() -> None:
    custom = add_custom_category(empty_custom_categories(), "expense", "Pets")

    assert category_label("expense", "Pets", custom) == "Pets (custom)"
    assert category_label("expense", "Groceries", custom) == "Groceries"
    assert category_label("income", "Pets", custom) == "Pets"
