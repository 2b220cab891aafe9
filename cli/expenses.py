#!/usr/bin/env python3

import ingestion.expenses as expense_import
from cli.common import (
    add_entity_commands,
    read_input,
    report_result,
    run_ingest,
    should_commit,
    write_output,
)
from logger import get_logger
from tools.exports import export_expenses_csv

logger = get_logger()


def cmd_import(args, services):
    """Validate an expenses CSV file against stored users and categories.

    Args:
        args: Parsed command-line arguments with file, dry_run, yes and strict
        services: Services container with the state service
    """
    text = read_input(args.file)
    users = services.state.get_users()
    categories = services.state.get_categories()
    policy = (
        expense_import.StrictExpenseImport()
        if args.strict
        else expense_import.LenientExpenseImport()
    )

    result = run_ingest(expense_import.ingest, text, users, categories, policy)
    report_result(result, "expenses")

    if result.valid:
        total = sum(expense.amount for expense in result.valid)
        logger.info(f"Total amount: ${total:.2f}")

    if should_commit(result, "expenses", args):
        added = services.state.add_expenses(result.valid)
        logger.info(f"✓ Imported {added} expenses")
        if added < len(result.valid):
            logger.info(f"  ({len(result.valid) - added} already stored, skipped)")


def cmd_export(args, services):
    """Export all expenses as CSV."""
    state = services.state
    csv_text = export_expenses_csv(
        state.get_expenses(), state.get_users(), state.get_categories()
    )
    write_output(csv_text, args.output)


def cmd_template(args, services):
    """Print an example expenses CSV file."""
    write_output(expense_import.template(), None)


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Import and export expenses",
        description="Import expenses from CSV, export them, or print a template",
    )
    import_parser = add_entity_commands(parser, cmd_import, cmd_export, cmd_template)
    import_parser.add_argument(
        "--strict",
        action="store_true",
        help="Require ids, description, positive amount and a valid date",
    )
