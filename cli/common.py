"""Helpers shared by the import/export command modules."""

import sys
from pathlib import Path
from typing import Optional

from ingestion.errors import FormatError
from logger import get_logger

logger = get_logger()


def read_input(path_arg: str) -> str:
    """Read an input file as text, exiting with an error if it is missing."""
    path = Path(path_arg)
    if not path.exists():
        logger.error(f"File not found: {path_arg}")
        sys.exit(1)
    return path.read_text(encoding="utf-8-sig")


def run_ingest(ingest, *args):
    """Call an ingestion module's ingest(), exiting on a format error."""
    try:
        return ingest(*args)
    except FormatError as e:
        logger.error(f"Cannot import file: {e}")
        sys.exit(1)


def report_result(result, entity: str) -> None:
    """Log how many rows were accepted and why the others were rejected."""
    logger.info(f"Valid {entity}: {len(result.valid)}")
    if result.row_errors:
        logger.warning(f"Rejected rows: {len(result.row_errors)}")
        for error in result.errors:
            logger.warning(f"  {error}")


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    """Ask a yes/no question unless assume_yes is set."""
    if assume_yes:
        return True
    answer = input(f"\n{prompt} (yes/no): ").strip().lower()
    return answer == "yes"


def should_commit(result, entity: str, args) -> bool:
    """Decide whether the valid rows of an import get stored."""
    if not result.valid:
        logger.info(f"No {entity} to import.")
        return False
    if args.dry_run:
        logger.info("Dry run, nothing was saved.")
        return False
    if not confirm(f"Import {len(result.valid)} {entity}?", args.yes):
        logger.info("Import cancelled.")
        return False
    return True


def write_output(text: str, output: Optional[str]) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if output is None:
        print(text)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {path}")


def add_entity_commands(parser, cmd_import, cmd_export, cmd_template):
    """Register the import, export and template subcommands of an entity type.

    Args:
        parser: The entity's command parser.
        cmd_import: Handler for "import FILE".
        cmd_export: Handler for "export".
        cmd_template: Handler for "template".

    Returns:
        The import subcommand parser, for entity-specific options.
    """
    entity_subparsers = parser.add_subparsers(
        title="subcommands",
        dest="subcommand",
        required=True,
    )

    import_parser = entity_subparsers.add_parser("import", help="Import a CSV file")
    import_parser.add_argument("file", help="Path to the CSV file")
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and report without saving",
    )
    import_parser.add_argument(
        "--yes", action="store_true", help="Save without asking for confirmation"
    )
    import_parser.set_defaults(func=cmd_import)

    export_parser = entity_subparsers.add_parser("export", help="Export as CSV")
    export_parser.add_argument(
        "--output", help="File to write (default: print to stdout)"
    )
    export_parser.set_defaults(func=cmd_export)

    template_parser = entity_subparsers.add_parser(
        "template", help="Print an example CSV file"
    )
    template_parser.set_defaults(func=cmd_template)

    return import_parser
