"""Helper utilities for tests."""

from pathlib import Path
import sqlite3

from db.migrator import apply_pending
from models.category import Category, Subcategory
from models.expense import Expense
from models.user import User


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending(conn, migrations_dir)


def csv_text(*lines: str) -> str:
    """Join CSV lines into file content."""
    return "\n".join(lines)


def make_user(user_id="1", name="Alex Chen", username="alexc", email=None, **kwargs):
    """Build a User with sensible defaults."""
    return User(
        id=user_id,
        name=name,
        username=username,
        email=email or f"{username}@example.com",
        avatar=kwargs.pop("avatar", "AC"),
        color=kwargs.pop("color", "bg-blue-500"),
        **kwargs,
    )


def make_category(category_id="1", name="Food", subcategories=(), **kwargs):
    """Build a Category whose subcategories are given as (id, name) pairs."""
    return Category(
        id=category_id,
        name=name,
        icon=kwargs.get("icon", "Tag"),
        color=kwargs.get("color", "text-blue-600"),
        subcategories=[
            Subcategory(id=sub_id, name=sub_name, category_id=category_id)
            for sub_id, sub_name in subcategories
        ],
    )


def make_expense(expense_id="e1", amount=10.0, date="2025-01-15", **kwargs):
    """Build an Expense referring to user 1, category 1, subcategory 1."""
    return Expense(
        id=expense_id,
        user_id=kwargs.pop("user_id", "1"),
        category_id=kwargs.pop("category_id", "1"),
        subcategory_id=kwargs.pop("subcategory_id", "1"),
        amount=amount,
        description=kwargs.pop("description", "Groceries"),
        date=date,
        created_at=kwargs.pop("created_at", "2025-01-15T10:30:00.000Z"),
        **kwargs,
    )
