"""Shared text formatting for CLI output."""

from decimal import Decimal

from models.transaction import Transaction
from tools.month_grid import local_date


def format_amount(amount: Decimal) -> str:
    """Format an amount with two decimals, e.g. "$1,234.50" or "-$40.00"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_signed_amount(transaction: Transaction) -> str:
    """Format a transaction amount with + for income and - for expense."""
    sign = "+" if transaction.is_income else "-"
    return f"{sign}${transaction.amount:,.2f}"


def format_transaction(transaction: Transaction) -> str:
    """Format a transaction as a single list line."""
    return (
        f"{local_date(transaction.date).isoformat()}  "
        f"{format_signed_amount(transaction):>12}  "
        f"{transaction.category.capitalize():<15} "
        f"{transaction.description}  [{transaction.id}]"
    )
