"""CSV export of users, categories and expenses.

Exports use the import column headers, so an exported file can be imported
again.
"""

from typing import List, Sequence

from ingestion import get_expected_headers
from ingestion.fields import join_fields
from ingestion.resolvers import by_id
from models.category import Category
from models.expense import Expense
from models.user import User


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ".0" for whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def _render(module_name: str, rows: List[List[str]]) -> str:
    lines = [join_fields(get_expected_headers(module_name))]
    lines += [join_fields(row) for row in rows]
    return "\n".join(lines)


def export_expenses_csv(
    expenses: Sequence[Expense],
    users: Sequence[User],
    categories: Sequence[Category],
) -> str:
    """Export expenses with the names of the user and categories they refer to."""
    rows = []
    for expense in expenses:
        user = by_id(expense.user_id, users)
        category = by_id(expense.category_id, categories)
        subcategory = (
            by_id(expense.subcategory_id, category.subcategories) if category else None
        )
        rows.append(
            [
                expense.id,
                expense.user_id,
                user.name if user else "",
                user.username if user else "",
                user.email if user else "",
                expense.category_id,
                category.name if category else "",
                expense.subcategory_id,
                subcategory.name if subcategory else "",
                format_amount(expense.amount),
                expense.description,
                expense.store_name or "",
                expense.store_location or "",
                expense.date,
                expense.created_at,
            ]
        )
    return _render("expenses", rows)


def export_categories_csv(categories: Sequence[Category]) -> str:
    """Export one row per subcategory.

    A category without subcategories still gets one row, with the
    subcategory columns left blank.
    """
    rows = []
    for category in categories:
        head = [category.id, category.name, category.icon, category.color]
        if not category.subcategories:
            rows.append(head + ["", ""])
        for sub in category.subcategories:
            rows.append(head + [sub.id, sub.name])
    return _render("categories", rows)


def export_users_csv(users: Sequence[User]) -> str:
    rows = [
        [
            user.id,
            user.name,
            user.username,
            user.email,
            user.avatar,
            user.color,
            user.default_category_id or "",
            user.default_subcategory_id or "",
            user.default_store_location or "",
        ]
        for user in users
    ]
    return _render("users", rows)
