#!/usr/bin/env python3

import sys
from datetime import date, datetime

from cli.formatting import format_amount
from tools.month_grid import build_month_grid, format_month_year, shift_month
from logger import get_logger

logger = get_logger()

_WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_month(value: str):
    """Parse a YYYY-MM string into a (year, month) pair.

    Raises:
        ValueError: If the value is not a valid YYYY-MM month.
    """
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def _format_cell(day) -> str:
    marker = "*" if day.is_today else " "
    label = f"{day.date.day:>2}{marker}"
    if not day.is_current_month:
        label = f"({day.date.day:>2})"
    if day.transactions:
        label += f" {len(day.transactions)}tx"
    return f"{label:<10}"


def cmd_show(args, services):
    """Show a month as a 6-week calendar with per-day totals.

    Args:
        args: Parsed command-line arguments with optional month and offset
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)

    if args.month:
        try:
            year, month = parse_month(args.month)
        except ValueError:
            logger.error(f"Invalid month '{args.month}'. Expected YYYY-MM.")
            sys.exit(1)
    else:
        today = date.today()
        year, month = today.year, today.month

    if args.offset:
        year, month = shift_month(year, month, args.offset)

    transactions = services.transactions.find_by_owner(owner_id)
    days = build_month_grid(year, month, transactions)

    logger.info(f"\n{format_month_year(year, month)}")
    logger.info("=" * 70)
    logger.info("".join(f"{name:<10}" for name in _WEEKDAYS))
    for week_start in range(0, len(days), 7):
        week = days[week_start:week_start + 7]
        logger.info("".join(_format_cell(day) for day in week))
    logger.info("-" * 70)

    active_days = [d for d in days if d.is_current_month and d.transactions]
    if not active_days:
        logger.info("No transactions this month.")
        return

    for day in active_days:
        logger.info(
            f"{day.date.isoformat()}: "
            f"income {format_amount(day.income)}, "
            f"expense {format_amount(day.expense)}, "
            f"net {format_amount(day.balance)}"
        )
        for transaction in day.transactions:
            logger.info(
                f"    {transaction.type:<8} {format_amount(transaction.amount):>12}  "
                f"{transaction.description}"
            )


def setup_parser(subparsers):
    """Setup calendar subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "calendar",
        help="Show a month of transactions as a calendar",
        description="Show a 6-week calendar grid with daily income and expenses",
    )
    parser.add_argument(
        "--month",
        help="Month to show as YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Months to move from --month, e.g. -1 for the previous month",
    )
    parser.add_argument(
        "--owner",
        help="Owner to act as (defaults to the configured owner_id)",
    )
    parser.set_defaults(func=cmd_show)
