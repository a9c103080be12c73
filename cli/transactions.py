#!/usr/bin/env python3

import sys
import argparse
import csv
import json
from decimal import Decimal
from pathlib import Path
from datetime import datetime
from models.category import ALL_CATEGORIES, TRANSACTION_TYPES
from models.document import parse_documents
from tools.filters import ALL, SORT_ORDERS, TYPE_FILTERS, TransactionFilters, apply_filters
from tools.summary import totals_by_type
from cli.formatting import format_amount, format_transaction
from logger import get_logger

logger = get_logger()

_EXPORT_HEADERS = ["id", "date", "type", "category", "amount", "description"]


def cmd_add(args, services):
    """Record a new income or expense transaction.

    Args:
        args: Parsed command-line arguments with amount, description, type, category
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)

    try:
        transaction = services.transactions.create(
            owner_id,
            args.amount,
            args.description,
            category=args.category,
            type=args.type,
        )
    except ValueError as e:
        logger.error(f"Invalid transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Your {transaction.type} has been added successfully")
    logger.info(f"  {format_transaction(transaction)}")


def cmd_delete(args, services):
    """Delete a transaction by ID.

    Args:
        args: Parsed command-line arguments with transaction_id
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)

    if not services.transactions.delete(args.transaction_id, owner_id):
        logger.error(f"Transaction '{args.transaction_id}' not found.")
        logger.info("Use 'python -m cli transactions list' to see transaction IDs.")
        sys.exit(1)

    logger.info("✓ The transaction has been deleted successfully")


def cmd_list(args, services):
    """List transactions with search, filters and sort order.

    Args:
        args: Parsed command-line arguments with search, type, category, sort
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)

    filters = TransactionFilters(
        search=args.search or "",
        type_filter=args.type,
        category=args.category,
        sort_order=args.sort,
    )
    transactions = apply_filters(services.transactions.find_by_owner(owner_id), filters)

    if not transactions:
        logger.info("No transactions found.")
        return

    logger.info("\nTransactions:")
    logger.info("=" * 80)
    for transaction in transactions:
        logger.info(format_transaction(transaction))
    logger.info("-" * 80)

    income_total, expense_total = totals_by_type(transactions)
    logger.info(f"Total transactions: {len(transactions)}")
    logger.info(f"Income:  {format_amount(income_total)}")
    logger.info(f"Expense: {format_amount(expense_total)}")


def cmd_export(args, services):
    """Export an owner's transactions to CSV.

    Args:
        args: Parsed command-line arguments with optional output path
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)
    transactions = services.transactions.find_by_owner(owner_id)

    if args.output:
        output_path = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path(f"transactions_{owner_id}_{timestamp}.csv")

    try:
        with open(output_path, "w", newline="") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(_EXPORT_HEADERS)
            for t in transactions:
                writer.writerow(
                    [
                        t.id,
                        t.date.isoformat(),
                        t.type,
                        t.category,
                        str(t.amount),
                        t.description,
                    ]
                )
    except OSError as e:
        logger.error(f"Error exporting transactions: {e}")
        sys.exit(1)

    logger.info(f"✓ Exported {len(transactions)} transaction(s) to: {output_path}")


def cmd_import(args, services):
    """Import transactions from a JSON array of stored documents.

    Documents must belong to the acting owner; malformed documents are
    skipped with an error in the log.

    Args:
        args: Parsed command-line arguments with json_file
        services: Services container with transactions service
    """
    owner_id = services.resolve_owner(args.owner)

    json_path = Path(args.json_file)
    if not json_path.exists():
        logger.error(f"File not found: {args.json_file}")
        sys.exit(1)

    try:
        with open(json_path, "r") as f:
            documents = json.load(f, parse_float=Decimal)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {args.json_file}: {e}")
        sys.exit(1)

    if not isinstance(documents, list):
        logger.error("Expected a JSON array of transaction documents.")
        sys.exit(1)

    transactions = parse_documents(documents)
    logger.info(f"Parsed {len(transactions)} of {len(documents)} document(s)")

    foreign = [t for t in transactions if t.owner_id != owner_id]
    if foreign:
        logger.warning(
            f"Skipping {len(foreign)} transaction(s) that belong to another owner"
        )
        transactions = [t for t in transactions if t.owner_id == owner_id]

    if not transactions:
        logger.info("No transactions to import.")
        return

    inserted_count = services.transactions.bulk_create(transactions)
    logger.info(f"✓ Successfully inserted {inserted_count} transactions")

    if inserted_count < len(transactions):
        skipped = len(transactions) - inserted_count
        logger.info(f"  ({skipped} duplicate transaction(s) skipped)")


def _add_owner_argument(parser):
    parser.add_argument(
        "--owner",
        help="Owner to act as (defaults to the configured owner_id)",
    )


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Add, delete, list, import and export transactions",
        description="Manage income and expense transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser(
        "add",
        help="Add a transaction",
        epilog="""
Examples:
  python -m cli transactions add 12.50 "Lunch" --category food
  python -m cli transactions add 2500 "October salary" --type income --category salary
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_parser.add_argument("amount", help="Positive amount")
    add_parser.add_argument("description", help="What the transaction was for")
    add_parser.add_argument(
        "--type",
        choices=TRANSACTION_TYPES,
        default="expense",
        help="Transaction type (default: expense)",
    )
    add_parser.add_argument(
        "--category",
        choices=ALL_CATEGORIES,
        help="Category (default: general for expenses, other for income)",
    )
    _add_owner_argument(add_parser)
    add_parser.set_defaults(func=cmd_add)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    _add_owner_argument(delete_parser)
    delete_parser.set_defaults(func=cmd_delete)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions with filters"
    )
    list_parser.add_argument(
        "--search", help="Match description or category (case-insensitive)"
    )
    list_parser.add_argument(
        "--type", choices=TYPE_FILTERS, default=ALL, help="Filter by type"
    )
    list_parser.add_argument(
        "--category",
        choices=(ALL,) + ALL_CATEGORIES,
        default=ALL,
        help="Filter by category",
    )
    list_parser.add_argument(
        "--sort", choices=SORT_ORDERS, default="newest", help="Sort order"
    )
    _add_owner_argument(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # transactions export
    export_parser = transactions_subparsers.add_parser(
        "export", help="Export transactions to CSV"
    )
    export_parser.add_argument(
        "--output", help="Output CSV path (default: transactions_<owner>_<time>.csv)"
    )
    _add_owner_argument(export_parser)
    export_parser.set_defaults(func=cmd_export)

    # transactions import
    import_parser = transactions_subparsers.add_parser(
        "import", help="Import transactions from a JSON document export"
    )
    import_parser.add_argument(
        "json_file", help="Path to a JSON array of transaction documents"
    )
    _add_owner_argument(import_parser)
    import_parser.set_defaults(func=cmd_import)
