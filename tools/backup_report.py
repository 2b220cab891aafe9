"""Plain-text rendering of a backup for people to read."""

from typing import List

from dateutil import parser as date_parser

from config import DEFAULT_USE_CASE
from models.backup import BackupDocument
from services.state import nest_subcategories

RECENT_EXPENSE_COUNT = 10


def _format_timestamp(timestamp: str) -> str:
    try:
        moment = date_parser.isoparse(timestamp)
    except (ValueError, OverflowError):
        return timestamp
    return moment.strftime("%B %d, %Y %I:%M %p %Z").strip()


def _amount(expense: dict) -> float:
    try:
        return float(expense.get("amount") or 0)
    except (TypeError, ValueError):
        return 0.0


def format_readable_backup(document: BackupDocument) -> str:
    """Render users, categories and an expense summary as text.

    The output is for reading only; it cannot be restored.
    """
    lines: List[str] = [
        "EXPENSE TRACKER BACKUP",
        "=" * 50,
        f"Backup Date: {_format_timestamp(document.timestamp)}",
        f"Version: {document.version}",
        f"Use Case: {document.use_case or DEFAULT_USE_CASE}",
        "",
    ]

    lines += ["USERS:", "-" * 20]
    if not document.users:
        lines.append("No users found")
    for index, user in enumerate(document.users, start=1):
        lines.append(f"{index}. {user.get('name')} ({user.get('username')})")
        lines.append(f"   Email: {user.get('email')}")
        lines.append(f"   Default Location: {user.get('defaultStoreLocation') or 'None'}")
        lines.append("")

    categories = nest_subcategories(document.categories, document.subcategories)
    lines += ["CATEGORIES:", "-" * 20]
    if not categories:
        lines.append("No categories found")
    for index, category in enumerate(categories, start=1):
        lines.append(f"{index}. {category.get('name')} ({category.get('icon')})")
        for sub in category["subcategories"]:
            lines.append(f"   - {sub.get('name')}")
        lines.append("")

    expenses = document.expenses
    lines += ["EXPENSES SUMMARY:", "-" * 20, f"Total Expenses: {len(expenses)}"]
    if not expenses:
        lines.append("No expenses found")
        return "\n".join(lines)

    total = sum(_amount(expense) for expense in expenses)
    dates = sorted(str(expense.get("date") or "") for expense in expenses)
    lines.append(f"Total Amount: ${total:.2f}")
    lines.append(f"Date Range: {dates[0]} to {dates[-1]}")

    users_by_id = {str(user.get("id")): user for user in document.users}
    categories_by_id = {str(c.get("id")): c for c in categories}
    recent = sorted(
        expenses, key=lambda expense: str(expense.get("date") or ""), reverse=True
    )[:RECENT_EXPENSE_COUNT]

    lines += ["", f"RECENT EXPENSES (Last {RECENT_EXPENSE_COUNT}):", "-" * 20]
    for index, expense in enumerate(recent, start=1):
        user = users_by_id.get(str(expense.get("userId")), {})
        category = categories_by_id.get(str(expense.get("categoryId")), {})
        lines.append(f"{index}. ${_amount(expense):.2f} - {expense.get('description')}")
        lines.append(f"   User: {user.get('name') or 'Unknown'}")
        lines.append(f"   Category: {category.get('name') or 'Unknown'}")
        lines.append(f"   Date: {expense.get('date')}")
        if expense.get("storeName"):
            lines.append(f"   Store: {expense['storeName']}")
        lines.append("")

    return "\n".join(lines)
