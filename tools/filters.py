"""Search, filter and sort transactions for the transaction list."""

from dataclasses import dataclass
from typing import List, Sequence

from models.transaction import Transaction

ALL = "all"

TYPE_FILTERS = (ALL, "income", "expense")

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_HIGHEST = "highest"
SORT_LOWEST = "lowest"

SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST, SORT_HIGHEST, SORT_LOWEST)

# sort order -> (key attribute, descending)
_SORT_KEYS = {
    SORT_NEWEST: ("date", True),
    SORT_OLDEST: ("date", False),
    SORT_HIGHEST: ("amount", True),
    SORT_LOWEST: ("amount", False),
}


@dataclass(frozen=True)
class TransactionFilters:
    """Active filters for the transaction list.

    Attributes:
        search: Case-insensitive substring matched against description or
            category. Empty matches everything.
        type_filter: "all", "income" or "expense".
        category: "all" or an exact category name.
        sort_order: One of "newest", "oldest", "highest", "lowest".

    Raises:
        ValueError: If type_filter or sort_order is not a known value.
    """

    search: str = ""
    type_filter: str = ALL
    category: str = ALL
    sort_order: str = SORT_NEWEST

    def __post_init__(self):
        if self.type_filter not in TYPE_FILTERS:
            raise ValueError(
                f"Unknown type filter: {self.type_filter}. "
                f"Expected one of {', '.join(TYPE_FILTERS)}"
            )
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(
                f"Unknown sort order: {self.sort_order}. "
                f"Expected one of {', '.join(SORT_ORDERS)}"
            )


def matches_search(transaction: Transaction, search: str) -> bool:
    """Check whether a transaction matches a search string."""
    if not search:
        return True
    needle = search.lower()
    return (
        needle in transaction.description.lower()
        or needle in transaction.category.lower()
    )


def apply_filters(
    transactions: Sequence[Transaction], filters: TransactionFilters
) -> List[Transaction]:
    """Filter and sort transactions for display.

    All filters must pass (logical AND); sorting happens afterwards. The
    order of transactions with equal sort keys is not guaranteed.

    Args:
        transactions: The owner's transactions, in any order.
        filters: Active filters.

    Returns:
        New list of matching transactions in the requested order.
    """
    result = [t for t in transactions if matches_search(t, filters.search)]

    if filters.type_filter != ALL:
        result = [t for t in result if t.type == filters.type_filter]

    if filters.category != ALL:
        result = [t for t in result if t.category == filters.category]

    key, descending = _SORT_KEYS[filters.sort_order]
    result.sort(key=lambda t: getattr(t, key), reverse=descending)

    return result
