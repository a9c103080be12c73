"""Monthly calendar grid of transactions.

The grid is always 6 weeks (42 days), Sunday through Saturday, padded with
days from the neighbouring months.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from models.calendar_day import CalendarDay
from models.transaction import Transaction

GRID_WEEKS = 6
GRID_DAYS = GRID_WEEKS * 7


def local_date(moment: datetime) -> date:
    """Get the calendar date of a moment in local time.

    Aware datetimes are converted to the local timezone; naive ones are
    taken to be local already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def grid_start(year: int, month: int) -> date:
    """Get the Sunday on which the grid for a month starts."""
    first_day = date(year, month, 1)
    # weekday() is 0 for Monday; shift so Sunday is 0
    days_from_prev_month = (first_day.weekday() + 1) % 7
    return first_day - timedelta(days=days_from_prev_month)


def bucket_by_date(
    transactions: Sequence[Transaction],
) -> Dict[date, List[Transaction]]:
    """Group transactions by their local calendar date, keeping input order."""
    buckets: Dict[date, List[Transaction]] = defaultdict(list)
    for transaction in transactions:
        buckets[local_date(transaction.date)].append(transaction)
    return buckets


def build_month_grid(
    year: int,
    month: int,
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """Build the 42-day calendar grid for a month.

    Args:
        year: Year (e.g., 2025).
        month: Month (1-12).
        transactions: The owner's transactions; any dates are accepted and
            those outside the grid are left out.
        today: Date to flag as today. Defaults to the current local date.

    Returns:
        List of exactly 42 CalendarDay objects, starting on a Sunday.

    Raises:
        ValueError: If month is not in 1-12.
    """
    if today is None:
        today = date.today()

    start = grid_start(year, month)
    buckets = bucket_by_date(transactions)

    days = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        days.append(
            CalendarDay(
                date=day,
                is_current_month=(day.year == year and day.month == month),
                is_today=(day == today),
                transactions=list(buckets.get(day, [])),
            )
        )

    return days


def shift_month(year: int, month: int, months: int) -> Tuple[int, int]:
    """Move a (year, month) pair by a number of months.

    Example:
        shift_month(2024, 1, -1) == (2023, 12)
    """
    shifted = date(year, month, 1) + relativedelta(months=months)
    return shifted.year, shifted.month


def format_month_year(year: int, month: int) -> str:
    """Format a month header, e.g. "January 2025"."""
    return date(year, month, 1).strftime("%B %Y")
