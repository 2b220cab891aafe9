"""Spreadsheet workbook import.

A workbook holds one sheet per entity type (users, categories, subcategories,
expenses), found by name or alias. Headers are normalized to lower-case
alphanumerics, so "Default Category ID" becomes "defaultcategoryid". Unlike the
CSV importers, workbook ids are kept as given, and expenses go through the
strict validation policy.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from ingestion.categories import normalize_color, normalize_icon
from ingestion.errors import RowError
from ingestion.expenses import StrictExpenseImport
from ingestion.results import ImportResult
from ingestion.tabular import RawRecord
from ingestion.users import DEFAULT_COLOR, VALID_COLORS, generate_initials
from logger import get_logger
from models.category import Category, Subcategory
from models.expense import Expense
from models.user import User

logger = get_logger(__name__)

# sheet name -> rows of cell values
Workbook = Dict[str, List[Sequence]]

SHEET_ALIASES = {
    "users": ["users", "user", "people", "team", "members"],
    "categories": ["categories", "category", "cats"],
    "subcategories": ["subcategories", "subcategory", "subs", "sub_categories"],
    "expenses": ["expenses", "expense", "transactions", "spending"],
}
REQUIRED_SHEETS = ("users", "categories", "expenses")

# canonical expense field -> normalized header aliases, in priority order
EXPENSE_FIELD_ALIASES = {
    "id": ("id", "expenseid"),
    "user_id": ("userid", "user"),
    "category_id": ("categoryid", "category"),
    "subcategory_id": ("subcategoryid", "subcategory"),
    "amount": ("amount", "cost", "price"),
    "description": ("description", "desc", "item"),
    "notes": ("notes", "note", "comments"),
    "store_name": ("storename", "store", "vendor", "merchant"),
    "store_location": ("storelocation", "location", "address"),
    "date": ("date", "expensedate", "transactiondate"),
    "created_at": ("createdat", "created"),
}


@dataclass
class SpreadsheetData:
    users: List[User] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)


@dataclass
class SpreadsheetResult:
    """Outcome of converting a workbook.

    data is only set when success is True, i.e. when no errors were found.
    """

    success: bool
    data: Optional[SpreadsheetData] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def read_workbook(path: Path) -> Workbook:
    """Read every sheet of an .xlsx file into lists of cell values."""
    workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        return {
            sheet.title: [list(row) for row in sheet.iter_rows(values_only=True)]
            for sheet in workbook.worksheets
        }
    finally:
        workbook.close()


def cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_header(value) -> str:
    return re.sub(r"[^a-z0-9]", "", cell_text(value).lower())


def process_sheet(rows: Sequence[Sequence]) -> List[RawRecord]:
    """Turn sheet rows into raw records keyed by normalized header.

    Blank rows are dropped; row numbers are the 1-based sheet row numbers.
    """
    if len(rows) < 2:
        return []

    headers = [normalize_header(cell) for cell in rows[0]]
    records = []
    for index, row in enumerate(rows[1:]):
        if not row or not any(cell_text(cell) for cell in row):
            continue
        fields = {}
        for position, header in enumerate(headers):
            if header:
                fields[header] = cell_text(row[position]) if position < len(row) else ""
        records.append(RawRecord(row_number=index + 2, fields=fields))
    return records


def extract_sheets(
    workbook: Workbook, errors: List[str], warnings: List[str]
) -> Dict[str, List[RawRecord]]:
    """Locate each entity sheet by name or alias and decode it."""
    by_lower_name = {name.lower(): name for name in workbook}
    sheets = {kind: [] for kind in SHEET_ALIASES}

    for kind, aliases in SHEET_ALIASES.items():
        actual = next(
            (by_lower_name[alias] for alias in aliases if alias in by_lower_name), None
        )
        if actual is not None:
            sheets[kind] = process_sheet(workbook[actual])
            continue

        message = (
            f'sheet "{kind}" not found. Expected one of: {", ".join(aliases)}'
        )
        if kind in REQUIRED_SHEETS:
            errors.append(f"Required {message}")
        else:
            warnings.append(f"Optional {message}")

    return sheets


def _first(record: RawRecord, *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return ""


def convert_users(
    records: Sequence[RawRecord], warnings: List[str]
) -> ImportResult[User]:
    """Convert users sheet rows, keeping the ids found in the sheet."""
    result = ImportResult()
    usernames = set()
    emails = set()

    for index, record in enumerate(records):
        name = _first(record, "name", "fullname", "username")
        username = _first(record, "username", "user") or re.sub(
            r"[^a-z0-9]", "", name.lower()
        )
        email = _first(record, "email", "emailaddress") or f"{username}@example.com"
        avatar = _first(record, "avatar", "initials") or generate_initials(name) or "U"
        color = _first(record, "color", "backgroundcolor") or DEFAULT_COLOR

        if not name:
            result.row_errors.append(
                RowError(record.row_number, "Name is required", "Users row")
            )
            continue
        if username.lower() in usernames:
            result.row_errors.append(
                RowError(
                    record.row_number, f'Duplicate username "{username}"', "Users row"
                )
            )
            continue
        if email.lower() in emails:
            result.row_errors.append(
                RowError(record.row_number, f'Duplicate email "{email}"', "Users row")
            )
            continue

        if color not in VALID_COLORS:
            warnings.append(
                f'Users row {record.row_number}: Invalid color "{color}", using default'
            )
            color = DEFAULT_COLOR

        user = User(
            id=_first(record, "id", "userid") or str(index + 1),
            name=name.strip(),
            username=username.lower(),
            email=email.lower(),
            avatar=avatar[:2].upper(),
            color=color,
            default_category_id=_first(record, "defaultcategoryid", "categoryid") or None,
            default_subcategory_id=_first(record, "defaultsubcategoryid", "subcategoryid")
            or None,
            default_store_location=_first(record, "defaultstorelocation", "location")
            or None,
        )
        result.valid.append(user)
        usernames.add(user.username)
        emails.add(user.email)

    return result


def convert_categories(
    category_records: Sequence[RawRecord],
    subcategory_records: Sequence[RawRecord],
    warnings: List[str],
) -> ImportResult[Category]:
    """Convert the categories sheet, then attach rows of the subcategories sheet."""
    result = ImportResult()
    by_id_map: Dict[str, Category] = {}

    for record in category_records:
        category_id = _first(record, "id", "categoryid")
        name = _first(record, "name", "categoryname")
        icon = _first(record, "icon", "iconname") or "Tag"
        color = _first(record, "color", "textcolor") or "text-blue-600"

        if not category_id or not name:
            result.row_errors.append(
                RowError(record.row_number, "ID and Name are required", "Categories row")
            )
            continue

        if normalize_color(color) != color:
            warnings.append(
                f'Categories row {record.row_number}: Invalid color "{color}", using default'
            )
        if normalize_icon(icon) != icon:
            warnings.append(
                f'Categories row {record.row_number}: Invalid icon "{icon}", using default'
            )

        by_id_map[category_id] = Category(
            id=category_id,
            name=name.strip(),
            icon=normalize_icon(icon),
            color=normalize_color(color),
        )

    for record in subcategory_records:
        subcategory_id = _first(record, "id", "subcategoryid")
        name = _first(record, "name", "subcategoryname")
        category_id = _first(record, "categoryid", "parentcategoryid")

        if not subcategory_id or not name or not category_id:
            result.row_errors.append(
                RowError(
                    record.row_number,
                    "ID, Name, and Category ID are required",
                    "Subcategories row",
                )
            )
            continue

        category = by_id_map.get(category_id)
        if category is None:
            result.row_errors.append(
                RowError(
                    record.row_number,
                    f'Category ID "{category_id}" not found',
                    "Subcategories row",
                )
            )
            continue

        category.subcategories.append(
            Subcategory(id=subcategory_id, name=name.strip(), category_id=category_id)
        )

    result.valid = list(by_id_map.values())
    return result


def canonical_expense_record(record: RawRecord) -> RawRecord:
    """Map aliased expense sheet headers onto the expense import field names."""
    return RawRecord(
        row_number=record.row_number,
        fields={
            key: _first(record, *aliases)
            for key, aliases in EXPENSE_FIELD_ALIASES.items()
        },
    )


def parse_workbook(workbook: Workbook) -> SpreadsheetResult:
    """Validate and convert a workbook into users, categories and expenses."""
    errors: List[str] = []
    warnings: List[str] = []

    sheets = extract_sheets(workbook, errors, warnings)
    if errors:
        return SpreadsheetResult(success=False, errors=errors, warnings=warnings)

    users = convert_users(sheets["users"], warnings)
    categories = convert_categories(
        sheets["categories"], sheets["subcategories"], warnings
    )
    expenses = StrictExpenseImport().validate(
        [canonical_expense_record(r) for r in sheets["expenses"]],
        users.valid,
        categories.valid,
    )

    for partial in (users, categories, expenses):
        errors.extend(partial.errors)

    logger.info(
        f"Workbook converted: {len(users.valid)} users, "
        f"{len(categories.valid)} categories, {len(expenses.valid)} expenses, "
        f"{len(errors)} errors, {len(warnings)} warnings"
    )

    if errors:
        return SpreadsheetResult(success=False, errors=errors, warnings=warnings)

    return SpreadsheetResult(
        success=True,
        data=SpreadsheetData(
            users=users.valid, categories=categories.valid, expenses=expenses.valid
        ),
        warnings=warnings,
    )


def parse_excel_file(path: Path) -> SpreadsheetResult:
    """Read and convert an .xlsx file; unreadable files become an error entry."""
    try:
        workbook = read_workbook(path)
    except (OSError, BadZipFile, InvalidFileException, KeyError, ValueError) as e:
        logger.error(f"Failed to read workbook {path}: {e}")
        return SpreadsheetResult(
            success=False, errors=[f"Failed to parse Excel file: {e}"]
        )
    return parse_workbook(workbook)

