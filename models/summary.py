"""Derived summaries over an owner's transactions."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Summary:
    """Dashboard totals.

    Attributes:
        total_income: Sum of all income amounts.
        total_expense: Sum of all expense amounts.
        balance: total_income - total_expense, may be negative.
        expense_ratio: Percentage of income spent, an int in [0, 100].
    """

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    expense_ratio: int

    @property
    def remaining_ratio(self) -> int:
        return 100 - self.expense_ratio

    def to_dict(self) -> dict:
        return {
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "balance": self.balance,
            "expense_ratio": self.expense_ratio,
        }


@dataclass
class ProfileStats:
    """Per-owner statistics shown on the profile page."""

    total_transactions: int
    total_income: Decimal
    total_expense: Decimal
    most_frequent_category: Optional[str]  # None when there are no transactions
