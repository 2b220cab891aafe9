#!/usr/bin/env python3
"""
Spendbook CLI - Import, export and back up expense tracker data.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    users        Import and export users
    categories   Import and export categories
    expenses     Import and export expenses
    backup       Create, restore and convert backups
    migrate      Database migrations

Examples:
    python -m cli users template > users.csv
    python -m cli users import users.csv --dry-run
    python -m cli expenses import expenses.csv --yes
    python -m cli backup create --readable
    python -m cli backup restore expense-tracker-backup-2025-01-15.json
    python -m cli backup convert-excel tracker.xlsx
    python -m cli migrate status
"""

import sys
import argparse
from cli import backup, categories, expenses, migrate, users
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from db.migrator import apply_pending
from logger import get_logger, setup_logging

logger = get_logger()


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendbook - Expense tracker data import, export and backup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Create subparsers for each command
    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    users.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    expenses.setup_parser(subparsers)
    backup.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    # Parse arguments and execute
    args = parser.parse_args()

    # Call the appropriate handler function
    if hasattr(args, "func"):
        try:
            # Load configuration
            config = load_config()

            # Set up logging
            setup_logging(config)

            db_manager = DatabaseManager(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, db_manager)
                return

            # Everything else reads the state table, so bring the schema up to date
            with db_manager.connect() as conn:
                apply_pending(conn, db_manager.get_migrations_dir())

            args.func(args, Services(config, db_manager=db_manager))
        except Exception as e:
            logger.error(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
