#!/usr/bin/env python3
"""
Financio CLI - Track income and expenses from the command line.

Usage:
    python -m cli <command> [subcommand] [options]

Commands:
    transactions Add, delete, list, import and export transactions
    dashboard    Show totals, expense ratio and recent transactions
    calendar     Show a month of transactions as a calendar
    profile      Show profile statistics
    migrate      Database migrations

Examples:
    python -m cli transactions add 12.50 "Lunch" --category food
    python -m cli transactions list --type expense --sort highest
    python -m cli dashboard watch
    python -m cli calendar --month 2025-01
    python -m cli migrate apply
"""

import sys
import argparse
from cli import calendar_view, dashboard, migrate, profile, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging

_SERVICE_COMMANDS = ("transactions", "dashboard", "calendar", "profile")


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Financio - Personal income and expense tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    transactions.setup_parser(subparsers)
    dashboard.setup_parser(subparsers)
    calendar_view.setup_parser(subparsers)
    profile.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            db_manager = DatabaseManager(config)

            if args.command in _SERVICE_COMMANDS:
                # Make sure the schema exists before touching transactions
                migrate.apply_pending_migrations(db_manager)
                services = Services(config, db_manager=db_manager)
                args.func(args, services)
            elif args.command == "migrate":
                args.func(args, db_manager)
            else:
                args.func(args)
        except KeyboardInterrupt:
            sys.exit(130)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
