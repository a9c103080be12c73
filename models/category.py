"""Fixed category sets for income and expense transactions."""

from typing import Tuple

INCOME = "income"
EXPENSE = "expense"

TRANSACTION_TYPES = (INCOME, EXPENSE)

EXPENSE_CATEGORIES = (
    "food",
    "transportation",
    "housing",
    "entertainment",
    "utilities",
    "healthcare",
    "education",
    "general",
)

INCOME_CATEGORIES = ("salary", "freelance", "investments", "gifts", "other")

ALL_CATEGORIES = EXPENSE_CATEGORIES + INCOME_CATEGORIES

# Category preselected for a new transaction of each type
DEFAULT_CATEGORIES = {
    EXPENSE: "general",
    INCOME: "other",
}


def categories_for(transaction_type: str) -> Tuple[str, ...]:
    """Get the categories allowed for a transaction type.

    Args:
        transaction_type: Either "income" or "expense".

    Returns:
        Tuple of category names.

    Raises:
        ValueError: If the transaction type is unknown.
    """
    if transaction_type == INCOME:
        return INCOME_CATEGORIES
    if transaction_type == EXPENSE:
        return EXPENSE_CATEGORIES
    raise ValueError(f"Unknown transaction type: {transaction_type}")


def is_valid_category(transaction_type: str, category: str) -> bool:
    """Check whether a category belongs to the set for a transaction type."""
    if transaction_type not in TRANSACTION_TYPES:
        return False
    return category in categories_for(transaction_type)
