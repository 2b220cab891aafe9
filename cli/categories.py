#!/usr/bin/env python3

import ingestion.categories as category_import
from cli.common import (
    add_entity_commands,
    read_input,
    report_result,
    run_ingest,
    should_commit,
    write_output,
)
from ingestion.ids import CategoryCounters
from logger import get_logger
from tools.exports import export_categories_csv

logger = get_logger()


def cmd_import(args, services):
    """Validate a categories CSV file and add the valid categories.

    Imported categories and subcategories get new ids following the ones
    already stored.
    """
    text = read_input(args.file)
    counters = CategoryCounters.after(services.state.get_categories())

    result = run_ingest(category_import.ingest, text, counters)
    report_result(result, "categories")

    for category in result.valid:
        subcategories = ", ".join(sub.name for sub in category.subcategories)
        logger.info(f"  {category.id}. {category.name}: {subcategories or '-'}")

    if should_commit(result, "categories", args):
        added = services.state.add_categories(result.valid)
        logger.info(f"✓ Imported {added} categories")


def cmd_export(args, services):
    """Export all categories as CSV, one row per subcategory."""
    write_output(export_categories_csv(services.state.get_categories()), args.output)


def cmd_template(args, services):
    """Print an example categories CSV file."""
    write_output(category_import.template(), None)


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Import and export categories",
        description="Import categories from CSV, export them, or print a template",
    )
    add_entity_commands(parser, cmd_import, cmd_export, cmd_template)
