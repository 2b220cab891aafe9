"""Backup service: snapshot, serialize, validate and restore application state."""

import copy
import json
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from dateutil import parser as date_parser
from pydantic import ValidationError

from config import Config
from ingestion.errors import RestoreError
from ingestion.expenses import utc_now_iso
from ingestion.spreadsheet import SpreadsheetData
from logger import get_logger
from models.backup import BackupDocument
from services.state import (
    DEFAULT_CREDENTIALS,
    DEFAULT_SETTINGS,
    StateService,
    flatten_categories,
)

logger = get_logger(__name__)

BACKUP_VERSION = "1.0.0"
BLANK_BACKUP_FILENAME_PATTERN = "expense-tracker-blank-{date}.json"
INVALID_BACKUP_MESSAGE = "Invalid backup file format"


def default_backup_filename(pattern: str, today: Optional[date] = None) -> str:
    """Fill the {date} placeholder of a backup filename pattern.

    Args:
        pattern: e.g. "expense-tracker-backup-{date}.json".
        today: Date to use; defaults to the current local date.
    """
    today = today or date.today()
    return pattern.format(date=today.isoformat())


def backup_date(timestamp: str) -> str:
    """Calendar date of a backup timestamp, or the raw value if unparsable."""
    try:
        return date_parser.isoparse(timestamp).date().isoformat()
    except (ValueError, OverflowError):
        return timestamp


def _groupable(document: BackupDocument) -> bool:
    """Whether category and subcategory entries are objects that can be regrouped."""
    subcategories = list(document.subcategories)
    for category in document.categories:
        if not isinstance(category, dict):
            return False
        nested = category.get("subcategories")
        if nested is not None and not isinstance(nested, list):
            return False
        subcategories += nested or []
    return all(isinstance(sub, dict) for sub in subcategories)


class BackupService:
    """Service for creating and restoring complete backups.

    Args:
        state: State service the snapshot is read from and restored into.
        config: Application configuration (use case for new documents).
    """

    def __init__(self, state: StateService, config: Config):
        self.state = state
        self.config = config

    def create_snapshot(self) -> BackupDocument:
        """Capture the full persisted state as a backup document."""
        snapshot = self.state.get_full_state()
        document = BackupDocument.model_validate(
            {"version": BACKUP_VERSION, "timestamp": utc_now_iso(), **snapshot}
        )
        logger.info(
            f"Created backup snapshot: {len(document.users)} users, "
            f"{len(document.categories)} categories, "
            f"{len(document.subcategories)} subcategories, "
            f"{len(document.expenses)} expenses"
        )
        return document

    def serialize(self, document: BackupDocument) -> str:
        """Render a document as indented JSON in the fixed key order."""
        return json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False)

    def deserialize(self, text: str) -> Any:
        """Parse backup JSON text.

        Raises:
            RestoreError: If the text is not valid JSON.
        """
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Backup is not valid JSON: {e}")
            raise RestoreError(INVALID_BACKUP_MESSAGE) from e

    def parse_document(self, candidate: Any) -> BackupDocument:
        """Check the top-level shape of a decoded backup.

        Raises:
            RestoreError: If the candidate does not look like a backup.
        """
        if isinstance(candidate, BackupDocument):
            return candidate
        if not isinstance(candidate, dict):
            logger.error(f"Backup must be a JSON object, got {type(candidate).__name__}")
            raise RestoreError(INVALID_BACKUP_MESSAGE)
        try:
            return BackupDocument.model_validate(candidate)
        except ValidationError as e:
            logger.error(f"Backup failed structure check: {e.error_count()} problem(s)")
            logger.debug(str(e))
            raise RestoreError(INVALID_BACKUP_MESSAGE) from e

    def validate_structure(self, candidate: Any) -> bool:
        """Whether a decoded backup has the expected top-level shape."""
        try:
            self.parse_document(candidate)
        except RestoreError:
            return False
        return True

    def restore(self, candidate: Union[BackupDocument, dict]) -> BackupDocument:
        """Replace the whole persisted state with a backup.

        Nothing is written unless the backup passes the structure check.
        Category and subcategory entries are regrouped on the way in, so they
        must be objects; other records are stored as given.

        Raises:
            RestoreError: If the backup is structurally invalid.
        """
        document = self.parse_document(candidate)
        if not _groupable(document):
            logger.error("Backup categories and subcategories must be JSON objects")
            raise RestoreError(INVALID_BACKUP_MESSAGE)
        self.state.replace_full_state(document.to_json_dict())
        logger.info(f"Restored backup version {document.version} from {document.timestamp}")
        return document

    def restore_from_file(self, path: Path) -> str:
        """Restore a backup file.

        Returns:
            Message naming the date the backup was taken.
        """
        document = self.restore(self.deserialize(Path(path).read_text(encoding="utf-8")))
        return f"Successfully restored backup from {backup_date(document.timestamp)}"

    def write_backup(self, path: Path, document: Optional[BackupDocument] = None) -> Path:
        """Write a document (by default a fresh snapshot) as JSON to path."""
        document = document or self.create_snapshot()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.serialize(document), encoding="utf-8")
        logger.info(f"Wrote backup to {path}")
        return path

    def _new_document(self, users, categories, subcategories, expenses) -> BackupDocument:
        credentials = copy.deepcopy(DEFAULT_CREDENTIALS)
        credentials["useCase"] = self.config.use_case
        return BackupDocument.model_validate(
            {
                "version": BACKUP_VERSION,
                "timestamp": utc_now_iso(),
                "users": users,
                "categories": categories,
                "subcategories": subcategories,
                "expenses": expenses,
                "credentials": credentials,
                "settings": copy.deepcopy(DEFAULT_SETTINGS),
                "useCase": self.config.use_case,
            }
        )

    def blank_document(self) -> BackupDocument:
        """A backup with no data and default credentials and settings."""
        return self._new_document([], [], [], [])

    def document_from_spreadsheet(self, data: SpreadsheetData) -> BackupDocument:
        """Build a restorable backup from a converted spreadsheet workbook."""
        categories, subcategories = flatten_categories(
            [category.to_dict() for category in data.categories]
        )
        return self._new_document(
            [user.to_dict() for user in data.users],
            categories,
            subcategories,
            [expense.to_dict() for expense in data.expenses],
        )
