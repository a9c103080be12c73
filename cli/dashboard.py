#!/usr/bin/env python3

import threading
from datetime import date

from cli.formatting import format_amount, format_transaction
from tools.summary import recent_transactions, summarize
from logger import get_logger

logger = get_logger()


def render_dashboard(transactions, recent_limit: int = 5) -> None:
    """Log the dashboard for a transaction snapshot."""
    summary = summarize(transactions)
    today = date.today()

    logger.info(f"\nDashboard - all transactions as of {today.strftime('%B %d, %Y')}")
    logger.info("=" * 80)
    logger.info(f"Balance:       {format_amount(summary.balance)}")
    logger.info(f"Total income:  {format_amount(summary.total_income)}")
    logger.info(f"Total expense: {format_amount(summary.total_expense)}")
    logger.info(
        f"Spent {summary.expense_ratio}% of income, "
        f"{summary.remaining_ratio}% remaining"
    )
    logger.info("-" * 80)

    if not transactions:
        logger.info("No transactions yet. Add one with 'python -m cli transactions add'.")
        return

    logger.info("Recent transactions:")
    for transaction in recent_transactions(transactions, recent_limit):
        logger.info(f"  {format_transaction(transaction)}")

    if len(transactions) > recent_limit:
        logger.info(
            f"  ... {len(transactions) - recent_limit} more "
            "('python -m cli transactions list' to see all)"
        )


def cmd_show(args, services):
    """Show dashboard totals and recent transactions.

    Args:
        args: Parsed command-line arguments with optional owner
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)
    transactions = services.transactions.find_by_owner(owner_id)
    render_dashboard(transactions, services.config.recent_limit)


def cmd_watch(args, services):
    """Re-render the dashboard every time the owner's transactions change.

    Changes made by other processes are picked up by polling the store
    every --interval seconds. Stop with Ctrl-C.

    Args:
        args: Parsed command-line arguments with optional owner and interval
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)
    interval = args.interval or services.config.watch_interval
    stop = threading.Event()

    def poll():
        while not stop.wait(interval):
            services.transactions.publish(owner_id)

    poller = threading.Thread(target=poll, name="financio-poller", daemon=True)

    with services.transactions.subscribe(owner_id) as subscription:
        poller.start()
        logger.info(f"Watching transactions for {owner_id} (Ctrl-C to stop)")
        try:
            for snapshot in subscription:
                render_dashboard(snapshot, services.config.recent_limit)
        except KeyboardInterrupt:
            logger.info("\nStopped watching.")
        finally:
            stop.set()


def setup_parser(subparsers):
    """Setup dashboard subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "dashboard",
        help="Show totals, expense ratio and recent transactions",
        description="Show the dashboard once, or keep it updated with 'watch'",
    )
    parser.add_argument(
        "--owner",
        help="Owner to act as (defaults to the configured owner_id)",
    )
    parser.set_defaults(func=cmd_show)

    dashboard_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available dashboard commands",
        dest="subcommand",
    )

    watch_parser = dashboard_subparsers.add_parser(
        "watch", help="Re-render the dashboard whenever transactions change"
    )
    watch_parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between checks for changes (default from config)",
    )
    watch_parser.set_defaults(func=cmd_watch)
