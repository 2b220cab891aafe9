"""Application state service.

The persisted state is a handful of logical collections (users, categories,
expenses, credentials, settings, use case), each stored as one JSON value in
the app_state table. Categories are stored with their subcategories nested.
"""

import json
from typing import Any, Dict, List, Tuple

from config import DEFAULT_USE_CASE
from logger import get_logger
from models.category import Category
from models.expense import Expense
from models.user import User

logger = get_logger(__name__)

USERS_KEY = "users"
CATEGORIES_KEY = "categories"
EXPENSES_KEY = "expenses"
CREDENTIALS_KEY = "credentials"
SETTINGS_KEY = "settings"
USE_CASE_KEY = "useCase"

DEFAULT_CREDENTIALS = {
    "username": "admin",
    "password": "pass123",
    "email": "admin@example.com",
    "securityQuestion": "What is your favorite color?",
    "securityAnswer": "blue",
    "useCase": DEFAULT_USE_CASE,
}
DEFAULT_SETTINGS = {"fontSize": "small", "auth": "false"}


def flatten_categories(categories: List[dict]) -> Tuple[List[dict], List[dict]]:
    """Split nested category records into categories and subcategories.

    Each subcategory record gets the categoryId of the category it came from.
    """
    flat_categories = []
    flat_subcategories = []
    for category in categories:
        flat_categories.append(
            {k: v for k, v in category.items() if k != "subcategories"}
        )
        for sub in category.get("subcategories") or []:
            flat_subcategories.append({**sub, "categoryId": category.get("id")})
    return flat_categories, flat_subcategories


def nest_subcategories(
    categories: List[dict], subcategories: List[dict]
) -> List[dict]:
    """Attach flattened subcategory records to their category records.

    Categories that still carry a nested "subcategories" list (older backups)
    keep it; flattened records are appended after it unless their id is
    already present.
    """
    nested = [
        {**category, "subcategories": list(category.get("subcategories") or [])}
        for category in categories
    ]
    by_id = {str(category.get("id")): category for category in nested}

    for sub in subcategories:
        category = by_id.get(str(sub.get("categoryId")))
        if category is None:
            logger.warning(
                f"Subcategory {sub.get('id')} refers to unknown category "
                f"{sub.get('categoryId')}, dropped"
            )
            continue
        if any(
            str(existing.get("id")) == str(sub.get("id"))
            for existing in category["subcategories"]
        ):
            continue
        category["subcategories"].append(sub)

    return nested


class StateService:
    """Service for reading and replacing the persisted application state."""

    def __init__(self, db_manager):
        """Initialize the state service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def get(self, key: str, default: Any = None) -> Any:
        """Get one stored value.

        Args:
            key: Collection key, e.g. "users".
            default: Returned when nothing is stored under key.

        Returns:
            The decoded JSON value, or default.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("SELECT value FROM app_state WHERE key = ?", (key,))
            row = cursor.fetchone()

        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        """Store one value, replacing whatever was stored under key."""
        with self.db_manager.transaction() as conn:
            self._write(conn, key, value)

    def _write(self, conn, key: str, value: Any) -> None:
        conn.execute(
            """
            INSERT INTO app_state (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(value, ensure_ascii=False)),
        )

    def get_users(self) -> List[User]:
        return [User.from_dict(data) for data in self.get(USERS_KEY, [])]

    def set_users(self, users: List[User]) -> None:
        self.set(USERS_KEY, [user.to_dict() for user in users])

    def get_categories(self) -> List[Category]:
        """Get categories with their subcategories nested."""
        return [Category.from_dict(data) for data in self.get(CATEGORIES_KEY, [])]

    def set_categories(self, categories: List[Category]) -> None:
        self.set(CATEGORIES_KEY, [category.to_dict() for category in categories])

    def get_expenses(self) -> List[Expense]:
        return [Expense.from_dict(data) for data in self.get(EXPENSES_KEY, [])]

    def set_expenses(self, expenses: List[Expense]) -> None:
        self.set(EXPENSES_KEY, [expense.to_dict() for expense in expenses])

    def get_credentials(self) -> Any:
        return self.get(CREDENTIALS_KEY, DEFAULT_CREDENTIALS)

    def get_settings(self) -> Any:
        return self.get(SETTINGS_KEY, DEFAULT_SETTINGS)

    def get_use_case(self) -> Any:
        return self.get(USE_CASE_KEY, DEFAULT_USE_CASE)

    def add_users(self, users: List[User]) -> int:
        """Append imported users to the stored ones.

        Returns:
            Number of users added.
        """
        self.set_users(self.get_users() + list(users))
        logger.info(f"Added {len(users)} users")
        return len(users)

    def add_categories(self, categories: List[Category]) -> int:
        """Append imported categories to the stored ones.

        Returns:
            Number of categories added.
        """
        self.set_categories(self.get_categories() + list(categories))
        logger.info(f"Added {len(categories)} categories")
        return len(categories)

    def add_expenses(self, expenses: List[Expense]) -> int:
        """Append imported expenses, skipping ids that are already stored.

        Returns:
            Number of expenses actually added.
        """
        stored = self.get_expenses()
        known_ids = {expense.id for expense in stored}
        new = [expense for expense in expenses if expense.id not in known_ids]

        skipped = len(expenses) - len(new)
        if skipped:
            logger.warning(f"Skipped {skipped} expenses whose ids already exist")

        self.set_expenses(stored + new)
        logger.info(f"Added {len(new)} expenses")
        return len(new)

    def get_full_state(self) -> Dict[str, Any]:
        """Get every collection, keyed by its external name.

        Records are returned as stored. Categories are flattened, with their
        subcategories listed separately under "subcategories".
        """
        categories, subcategories = flatten_categories(self.get(CATEGORIES_KEY, []))
        return {
            "users": self.get(USERS_KEY, []),
            "categories": categories,
            "subcategories": subcategories,
            "expenses": self.get(EXPENSES_KEY, []),
            "credentials": self.get_credentials(),
            "settings": self.get_settings(),
            "useCase": self.get_use_case(),
        }

    def replace_full_state(self, snapshot: Dict[str, Any]) -> None:
        """Replace every collection at once.

        Args:
            snapshot: Mapping shaped like get_full_state(); categories may be
                flattened (with "subcategories" alongside) or nested.
        """
        categories = nest_subcategories(
            snapshot.get("categories") or [], snapshot.get("subcategories") or []
        )
        values = {
            USERS_KEY: snapshot.get("users") or [],
            CATEGORIES_KEY: categories,
            EXPENSES_KEY: snapshot.get("expenses") or [],
            CREDENTIALS_KEY: snapshot.get("credentials"),
            SETTINGS_KEY: snapshot.get("settings"),
            USE_CASE_KEY: snapshot.get("useCase"),
        }

        with self.db_manager.transaction() as conn:
            for key, value in values.items():
                self._write(conn, key, value)

        logger.info(
            f"Replaced application state: {len(values[USERS_KEY])} users, "
            f"{len(categories)} categories, {len(values[EXPENSES_KEY])} expenses"
        )
