#!/usr/bin/env python3

from cli.formatting import format_amount
from tools.summary import profile_stats
from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show profile statistics for an owner."""
    owner_id = services.resolve_owner(args.owner)
    stats = profile_stats(services.transactions.find_by_owner(owner_id))

    category = stats.most_frequent_category
    logger.info(f"\nProfile: {owner_id}")
    logger.info("=" * 80)
    logger.info(f"Total transactions:      {stats.total_transactions}")
    logger.info(f"Total income:            {format_amount(stats.total_income)}")
    logger.info(f"Total expenses:          {format_amount(stats.total_expense)}")
    logger.info(
        f"Most frequent category:  {category.capitalize() if category else 'None'}"
    )


def setup_parser(subparsers):
    """Setup profile subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "profile",
        help="Show profile statistics",
        description="Show transaction count, totals and most used category",
    )
    parser.add_argument(
        "--owner",
        help="Owner to act as (defaults to the configured owner_id)",
    )
    parser.set_defaults(func=cmd_show)
