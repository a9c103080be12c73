"""Transaction aggregation tools."""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence, Tuple

from models.summary import ProfileStats, Summary
from models.transaction import Transaction


def totals_by_type(transactions: Sequence[Transaction]) -> Tuple[Decimal, Decimal]:
    """Sum income and expense amounts.

    Args:
        transactions: Transactions to aggregate, in any order.

    Returns:
        Tuple of (income_total, expense_total). Records of any other type
        are ignored.
    """
    income_total = Decimal("0")
    expense_total = Decimal("0")

    for transaction in transactions:
        if transaction.type == "income":
            income_total += transaction.amount
        elif transaction.type == "expense":
            expense_total += transaction.amount

    return income_total, expense_total


def expense_ratio(income_total: Decimal, expense_total: Decimal) -> int:
    """Get the percentage of income consumed by expenses.

    Rounds half up and clamps to [0, 100]. With no income the ratio is 0.
    """
    if income_total <= 0:
        return 0

    ratio = (expense_total / income_total * 100).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(min(max(ratio, Decimal("0")), Decimal("100")))


def summarize(transactions: Sequence[Transaction]) -> Summary:
    """Compute dashboard totals for a set of transactions.

    Args:
        transactions: The owner's current transactions.

    Returns:
        Summary with total income, total expense, balance and expense ratio.

    Example:
        income of 100 and expense of 40 gives
        Summary(total_income=100, total_expense=40, balance=60, expense_ratio=40)
    """
    income_total, expense_total = totals_by_type(transactions)

    return Summary(
        total_income=income_total,
        total_expense=expense_total,
        balance=income_total - expense_total,
        expense_ratio=expense_ratio(income_total, expense_total),
    )


def recent_transactions(
    transactions: Sequence[Transaction], limit: int = 5
) -> List[Transaction]:
    """Get the most recent transactions, newest first."""
    if limit <= 0:
        return []
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]


def profile_stats(transactions: Sequence[Transaction]) -> ProfileStats:
    """Compute profile statistics.

    The most frequent category is the one used by the most transactions;
    on a tie, the category that appears first in the input wins.
    """
    income_total, expense_total = totals_by_type(transactions)

    # most_common() keeps first-seen order among equal counts
    category_counts = Counter(t.category for t in transactions)
    most_common = category_counts.most_common(1)

    return ProfileStats(
        total_transactions=len(transactions),
        total_income=income_total,
        total_expense=expense_total,
        most_frequent_category=most_common[0][0] if most_common else None,
    )
