#!/usr/bin/env python3

import ingestion.users as user_import
from cli.common import (
    add_entity_commands,
    read_input,
    report_result,
    run_ingest,
    should_commit,
    write_output,
)
from ingestion.ids import IdCounter
from logger import get_logger
from tools.exports import export_users_csv

logger = get_logger()


def cmd_import(args, services):
    """Validate a users CSV file and add the valid users."""
    text = read_input(args.file)
    existing = services.state.get_users()
    counter = IdCounter.after(user.id for user in existing)

    result = run_ingest(user_import.ingest, text, existing, counter)
    report_result(result, "users")

    if should_commit(result, "users", args):
        added = services.state.add_users(result.valid)
        logger.info(f"✓ Imported {added} users")


def cmd_export(args, services):
    """Export all users as CSV."""
    write_output(export_users_csv(services.state.get_users()), args.output)


def cmd_template(args, services):
    """Print an example users CSV file."""
    write_output(user_import.template(), None)


def setup_parser(subparsers):
    """Setup users subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "users",
        help="Import and export users",
        description="Import users from CSV, export them, or print a template",
    )
    add_entity_commands(parser, cmd_import, cmd_export, cmd_template)
