"""Default and user-defined transaction categories."""

from models import EXPENSE, INCOME, TRANSACTION_TYPES
from validation import TransactionValidationError


DEFAULT_CATEGORIES = {
    INCOME: (
        "Salary",
        "Freelance Work",
        "Business Income",
        "Investment Returns",
        "Rental Income",
        "Side Hustle",
        "Bonus",
        "Gift/Cash Received",
        "Refund",
        "Other Income",
    ),
    EXPENSE: (
        "Food & Dining",
        "Groceries",
        "Transportation",
        "Fuel/Gas",
        "Entertainment",
        "Shopping",
        "Clothing",
        "Utilities",
        "Rent/Mortgage",
        "Healthcare",
        "Insurance",
        "Education",
        "Travel",
        "Subscriptions",
        "Personal Care",
        "Home & Garden",
        "Electronics",
        "Gifts & Donations",
        "Bank Fees",
        "Other Expenses",
    ),
}


def _check_type(tx_type: str) -> str:
    if tx_type not in TRANSACTION_TYPES:
        raise ValueError(f"Unsupported transaction type: {tx_type}")
    return tx_type


def empty_custom_categories() -> dict[str, tuple[str, ...]]:
    return {INCOME: (), EXPENSE: ()}


def all_categories(tx_type: str, custom_categories: dict[str, tuple[str, ...]] | None = None) -> list[str]:
    """Default categories for a type followed by the user's custom ones."""
    _check_type(tx_type)
    custom = (custom_categories or {}).get(tx_type, ())
    return [*DEFAULT_CATEGORIES[tx_type], *custom]


def is_custom_category(
    tx_type: str, category: str, custom_categories: dict[str, tuple[str, ...]] | None = None
) -> bool:
    return category in (custom_categories or {}).get(_check_type(tx_type), ())


def category_label(
    tx_type: str, category: str, custom_categories: dict[str, tuple[str, ...]] | None = None
) -> str:
    """Display name for pickers; user-defined categories are marked."""
    if is_custom_category(tx_type, category, custom_categories):
        return f"{category} (custom)"
    return category


def add_custom_category(
    custom_categories: dict[str, tuple[str, ...]] | None, tx_type: str, name: str
) -> dict[str, tuple[str, ...]]:
    """Return a new custom-category mapping with ``name`` appended."""
    if tx_type not in TRANSACTION_TYPES:
        raise TransactionValidationError("Please enter a category name and select a type first")
    category = str(name or "").strip()
    if not category:
        raise TransactionValidationError("Please enter a category name and select a type first")
    if category in all_categories(tx_type, custom_categories):
        raise TransactionValidationError("Category already exists")

    out = empty_custom_categories()
    for key, values in (custom_categories or {}).items():
        out[key] = tuple(values)
    out[tx_type] = (*out.get(tx_type, ()), category)
    return out
