from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List

from models.transaction import Transaction


@dataclass
class CalendarDay:
    """One cell of the monthly calendar grid.

    Attributes:
        date: The calendar date of this cell.
        is_current_month: False for padding days from the adjacent months.
        is_today: True when the date matches the local date at build time.
        transactions: Transactions whose local date is this day.
    """

    date: date
    is_current_month: bool
    is_today: bool = False
    transactions: List[Transaction] = field(default_factory=list)

    @property
    def income(self) -> Decimal:
        return sum((t.amount for t in self.transactions if t.is_income), Decimal("0"))

    @property
    def expense(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.is_expense), Decimal("0")
        )

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense
