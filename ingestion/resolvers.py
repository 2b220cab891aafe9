"""Reference resolution for imported rows.

Each lookup is a pure function (value, items) -> Optional[item]. Resolution
tries an ordered list of (raw value, lookup) pairs and returns the first hit;
None is the "not found" outcome so callers can name the failed reference.
"""

from typing import Callable, Iterable, Optional, Sequence, Tuple, TypeVar

from models.category import Category, Subcategory
from models.user import User

T = TypeVar("T")
Lookup = Callable[[str, Sequence[T]], Optional[T]]


def _by_attribute(attribute: str, case_sensitive: bool) -> Lookup:
    def lookup(value, items):
        if not value:
            return None
        wanted = value if case_sensitive else value.lower()
        for item in items:
            candidate = getattr(item, attribute) or ""
            if not case_sensitive:
                candidate = candidate.lower()
            if candidate == wanted:
                return item
        return None

    lookup.__name__ = f"by_{attribute}"
    return lookup


by_id = _by_attribute("id", case_sensitive=True)
by_name = _by_attribute("name", case_sensitive=False)
by_username = _by_attribute("username", case_sensitive=False)
by_email = _by_attribute("email", case_sensitive=False)

USER_LOOKUPS = (by_id, by_name, by_username, by_email)
CATEGORY_LOOKUPS = (by_id, by_name)
SUBCATEGORY_LOOKUPS = (by_id, by_name)


def resolve_first(
    candidates: Iterable[Tuple[str, Lookup]], items: Sequence[T]
) -> Optional[T]:
    """Try each (raw value, lookup) pair in order and return the first match."""
    for value, lookup in candidates:
        found = lookup(value, items)
        if found is not None:
            return found
    return None


def resolve_user(value: str, users: Sequence[User]) -> Optional[User]:
    """Resolve a single raw value as a user id, name, username or email."""
    return resolve_first(((value, lookup) for lookup in USER_LOOKUPS), users)


def resolve_category(value: str, categories: Sequence[Category]) -> Optional[Category]:
    """Resolve a raw value as a category id or name."""
    return resolve_first(((value, lookup) for lookup in CATEGORY_LOOKUPS), categories)


def resolve_subcategory(value: str, category: Category) -> Optional[Subcategory]:
    """Resolve a raw value as a subcategory id or name within one category."""
    return resolve_first(
        ((value, lookup) for lookup in SUBCATEGORY_LOOKUPS), category.subcategories
    )


def resolve_user_fields(
    users: Sequence[User],
    user_id: str = "",
    name: str = "",
    username: str = "",
    email: str = "",
) -> Optional[User]:
    """Resolve a user from the separate identifying columns of a row.

    Each column is matched against its own attribute, in the order
    id, name, username, email.
    """
    return resolve_first(
        [(user_id, by_id), (name, by_name), (username, by_username), (email, by_email)],
        users,
    )


def resolve_category_fields(
    categories: Sequence[Category], category_id: str = "", name: str = ""
) -> Optional[Category]:
    """Resolve a category from its id and name columns."""
    return resolve_first([(category_id, by_id), (name, by_name)], categories)


def resolve_subcategory_fields(
    category: Category, subcategory_id: str = "", name: str = ""
) -> Optional[Subcategory]:
    """Resolve a subcategory of an already-resolved category."""
    return resolve_first(
        [(subcategory_id, by_id), (name, by_name)], category.subcategories
    )
