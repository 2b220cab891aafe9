"""Expense import.

Two validation policies exist and are kept apart on purpose:

* LenientExpenseImport is used for CSV text. It resolves references by id,
  name, username or email and accepts any amount (unparsable becomes 0).
* StrictExpenseImport is used for spreadsheet workbooks. It requires
  description, a positive amount and a parseable date, and resolves
  references by id only.
"""

import math
import time
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

from dateutil import parser as date_parser

from ingestion.errors import RowError
from ingestion.resolvers import (
    by_id,
    resolve_category_fields,
    resolve_first,
    resolve_subcategory_fields,
    resolve_user_fields,
)
from ingestion.results import ImportResult
from ingestion.tabular import RawRecord, decode
from ingestion.templates import expense_template
from logger import get_logger
from models.category import Category
from models.expense import Expense
from models.user import User

logger = get_logger(__name__)

template = expense_template

COLUMNS = [
    ("ID", "id"),
    ("User ID", "user_id"),
    ("User Name", "user_name"),
    ("Username", "user_username"),
    ("Email", "user_email"),
    ("Category ID", "category_id"),
    ("Category Name", "category_name"),
    ("Subcategory ID", "subcategory_id"),
    ("Subcategory Name", "subcategory_name"),
    ("Amount", "amount"),
    ("Description", "description"),
    ("Store Name", "store_name"),
    ("Store Location", "store_location"),
    ("Date", "date"),
    ("Created At", "created_at"),
]

# Day zero of spreadsheet serial dates (accounts for the 1900 leap-year bug)
SPREADSHEET_EPOCH = date(1899, 12, 30)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return (
        datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    )


def parse_amount(value: str) -> Optional[float]:
    """Parse an amount as a float; None when unparsable or not finite."""
    try:
        amount = float(value.strip())
    except (AttributeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def parse_date(value: str) -> Optional[str]:
    """Normalize a date cell to YYYY-MM-DD.

    Accepts ISO dates and timestamps, free-form date strings, and spreadsheet
    serial day numbers. Returns None when the value is not a date.
    """
    value = (value or "").strip()
    if not value:
        return None

    try:
        serial = float(value)
    except ValueError:
        serial = None

    if serial is not None:
        if not math.isfinite(serial) or serial <= 0:
            return None
        try:
            return (SPREADSHEET_EPOCH + timedelta(days=int(serial))).isoformat()
        except OverflowError:
            return None

    try:
        return date_parser.parse(value).date().isoformat()
    except (ValueError, OverflowError):
        return None


class ExpenseImportPolicy:
    """Common row loop for expense validation policies."""

    label = "Row"

    def validate(
        self,
        records: Sequence[RawRecord],
        users: Sequence[User],
        categories: Sequence[Category],
    ) -> ImportResult[Expense]:
        """Validate raw expense records against existing users and categories.

        Args:
            records: Decoded rows.
            users: Users the rows may reference.
            categories: Categories (with subcategories) the rows may reference.

        Returns:
            ImportResult with one Expense per accepted row and one RowError per
            rejected row.
        """
        result = ImportResult()
        for record in records:
            try:
                result.valid.append(self.build(record, users, categories))
            except RowError as error:
                result.row_errors.append(error)

        logger.info(
            f"{type(self).__name__}: {len(result.valid)} accepted, "
            f"{len(result.row_errors)} rejected"
        )
        return result

    def build(
        self,
        record: RawRecord,
        users: Sequence[User],
        categories: Sequence[Category],
    ) -> Expense:
        raise NotImplementedError

    def reject(self, record: RawRecord, reason: str) -> RowError:
        return RowError(record.row_number, reason, self.label)


class LenientExpenseImport(ExpenseImportPolicy):
    """Validation of expense rows decoded from CSV text."""

    def build(self, record, users, categories):
        user = resolve_user_fields(
            users,
            user_id=record.get("user_id"),
            name=record.get("user_name"),
            username=record.get("user_username"),
            email=record.get("user_email"),
        )
        if user is None:
            raise self.reject(record, "User not found")

        category = resolve_category_fields(
            categories,
            category_id=record.get("category_id"),
            name=record.get("category_name"),
        )
        if category is None:
            raise self.reject(record, "Category not found")

        subcategory = resolve_subcategory_fields(
            category,
            subcategory_id=record.get("subcategory_id"),
            name=record.get("subcategory_name"),
        )
        if subcategory is None:
            raise self.reject(record, "Subcategory not found")

        amount = parse_amount(record.get("amount"))
        if amount is None:
            logger.warning(
                f"Row {record.row_number}: unparsable amount "
                f"{record.get('amount')!r}, using 0"
            )
            amount = 0.0

        return Expense(
            id=record.get("id") or str(uuid.uuid4()),
            user_id=user.id,
            category_id=category.id,
            subcategory_id=subcategory.id,
            amount=amount,
            description=record.get("description"),
            date=record.get("date"),
            created_at=record.get("created_at") or utc_now_iso(),
            store_name=record.get("store_name") or None,
            store_location=record.get("store_location") or None,
        )


class StrictExpenseImport(ExpenseImportPolicy):
    """Validation of expense rows read from a spreadsheet workbook."""

    label = "Expenses row"

    def build(self, record, users, categories):
        user_id = record.get("user_id")
        category_id = record.get("category_id")
        subcategory_id = record.get("subcategory_id")
        description = record.get("description").strip()
        amount = parse_amount(record.get("amount", "0"))
        expense_date = parse_date(record.get("date"))

        if not user_id:
            raise self.reject(record, "User ID is required")
        if not category_id:
            raise self.reject(record, "Category ID is required")
        if not subcategory_id:
            raise self.reject(record, "Subcategory ID is required")
        if not description:
            raise self.reject(record, "Description is required")
        if amount is None or amount <= 0:
            raise self.reject(record, "Valid amount is required")
        if not expense_date:
            raise self.reject(record, "Valid date is required")

        user = resolve_first([(user_id, by_id)], users)
        if user is None:
            raise self.reject(record, f'User ID "{user_id}" not found')

        category = resolve_first([(category_id, by_id)], categories)
        if category is None:
            raise self.reject(record, f'Category ID "{category_id}" not found')

        subcategory = resolve_first([(subcategory_id, by_id)], category.subcategories)
        if subcategory is None:
            raise self.reject(
                record,
                f'Subcategory ID "{subcategory_id}" not found in category "{category.name}"',
            )

        created_at = record.get("created_at").strip()
        if not parse_date(created_at):
            created_at = utc_now_iso()

        return Expense(
            id=record.get("id") or generate_spreadsheet_id(),
            user_id=user.id,
            category_id=category.id,
            subcategory_id=subcategory.id,
            amount=amount,
            description=description,
            date=expense_date,
            created_at=created_at,
            notes=record.get("notes").strip() or None,
            store_name=record.get("store_name").strip() or None,
            store_location=record.get("store_location").strip() or None,
        )


def generate_spreadsheet_id() -> str:
    """Id for spreadsheet rows without one: exp-<epoch millis>-<random>."""
    return f"exp-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def ingest(
    text: str,
    users: Sequence[User],
    categories: Sequence[Category],
    policy: Optional[ExpenseImportPolicy] = None,
) -> ImportResult[Expense]:
    """Decode expense CSV text and validate it.

    Args:
        text: CSV content with an expense header row.
        users: Existing users.
        categories: Existing categories with subcategories.
        policy: Validation policy, LenientExpenseImport by default.

    Returns:
        ImportResult with accepted expenses and all row errors (decoding and
        validation) ordered by row number.

    Raises:
        FormatError: If the text has no data or misses required columns.
    """
    table = decode(text, COLUMNS)
    policy = policy or LenientExpenseImport()
    return policy.validate(table.records, users, categories).merge_errors(table.errors)

