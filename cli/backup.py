#!/usr/bin/env python3

import sys
from pathlib import Path

from cli.common import confirm, read_input, write_output
from ingestion.errors import RestoreError
from ingestion.spreadsheet import parse_excel_file
from logger import get_logger
from services.backup import (
    BLANK_BACKUP_FILENAME_PATTERN,
    backup_date,
    default_backup_filename,
)
from tools.backup_report import format_readable_backup

logger = get_logger()

READABLE_FILENAME_PATTERN = "expense-tracker-readable-{date}.txt"


def _target(args, config, pattern: str) -> Path:
    if args.output:
        return Path(args.output)
    return config.backup_dir / default_backup_filename(pattern)


def cmd_create(args, services):
    """Write a backup of the full application state."""
    backup = services.backup
    document = backup.create_snapshot()

    if args.readable:
        path = _target(args, services.config, READABLE_FILENAME_PATTERN)
        write_output(format_readable_backup(document), str(path))
        return

    path = _target(args, services.config, services.config.backup_filename_pattern)
    backup.write_backup(path, document)
    logger.info(
        f"✓ Backed up {len(document.users)} users, {len(document.categories)} "
        f"categories and {len(document.expenses)} expenses to {path}"
    )


def cmd_restore(args, services):
    """Replace the application state with a backup file."""
    backup = services.backup
    text = read_input(args.file)

    try:
        document = backup.parse_document(backup.deserialize(text))
    except RestoreError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Backup version {document.version}, taken {document.timestamp}")
    logger.info(
        f"Contains {len(document.users)} users, {len(document.categories)} "
        f"categories and {len(document.expenses)} expenses"
    )
    if not confirm("This replaces ALL current data. Continue?", args.yes):
        logger.info("Restore cancelled.")
        return

    backup.restore(document)
    logger.info(f"✓ Successfully restored backup from {backup_date(document.timestamp)}")


def cmd_blank(args, services):
    """Write a backup file with no data, to start a fresh setup from."""
    path = _target(args, services.config, BLANK_BACKUP_FILENAME_PATTERN)
    services.backup.write_backup(path, services.backup.blank_document())
    logger.info(f"✓ Created blank backup file {path}")


def cmd_convert_excel(args, services):
    """Convert an .xlsx workbook into a backup file that can be restored."""
    source = Path(args.file)
    if not source.exists():
        logger.error(f"File not found: {args.file}")
        sys.exit(1)

    result = parse_excel_file(source)
    for warning in result.warnings:
        logger.warning(warning)
    if not result.success:
        logger.error(f"Workbook has {len(result.errors)} error(s):")
        for error in result.errors:
            logger.error(f"  {error}")
        sys.exit(1)

    document = services.backup.document_from_spreadsheet(result.data)
    path = Path(args.output) if args.output else source.with_suffix(".json")
    services.backup.write_backup(path, document)
    logger.info(
        f"✓ Converted {len(document.users)} users, {len(document.categories)} "
        f"categories and {len(document.expenses)} expenses to {path}"
    )


def setup_parser(subparsers):
    """Setup backup subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "backup",
        help="Create and restore backups",
        description="Create, restore and convert full backups of the application state",
    )
    backup_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available backup commands",
        dest="subcommand",
        required=True,
    )

    create_parser = backup_subparsers.add_parser("create", help="Create a backup")
    create_parser.add_argument(
        "--output", help="File to write (default: in the configured backup_dir)"
    )
    create_parser.add_argument(
        "--readable",
        action="store_true",
        help="Write a plain-text summary instead of a restorable JSON backup",
    )
    create_parser.set_defaults(func=cmd_create)

    restore_parser = backup_subparsers.add_parser(
        "restore", help="Restore a backup file"
    )
    restore_parser.add_argument("file", help="Path to the backup JSON file")
    restore_parser.add_argument(
        "--yes", action="store_true", help="Restore without asking for confirmation"
    )
    restore_parser.set_defaults(func=cmd_restore)

    blank_parser = backup_subparsers.add_parser(
        "blank", help="Create an empty backup file"
    )
    blank_parser.add_argument("--output", help="File to write")
    blank_parser.set_defaults(func=cmd_blank)

    convert_parser = backup_subparsers.add_parser(
        "convert-excel", help="Convert an .xlsx workbook into a backup file"
    )
    convert_parser.add_argument("file", help="Path to the .xlsx workbook")
    convert_parser.add_argument(
        "--output", help="File to write (default: next to the workbook, as .json)"
    )
    convert_parser.set_defaults(func=cmd_convert_excel)
