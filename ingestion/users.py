"""User import.

Usernames and emails are normalized to lower case and must be unique across
the batch and the existing users. New sequential ids are assigned past the
largest existing numeric id; ids in the file are ignored.
"""

import re
from typing import Optional, Sequence, Set

from ingestion.errors import RowError
from ingestion.ids import IdCounter
from ingestion.results import ImportResult
from ingestion.tabular import RawRecord, decode
from ingestion.templates import user_template
from logger import get_logger
from models.user import User

logger = get_logger(__name__)

template = user_template

COLUMNS = [
    ("User ID", "id"),
    ("Name", "name"),
    ("Username", "username"),
    ("Email", "email"),
    ("Avatar", "avatar"),
    ("Color", "color"),
    ("Default Category ID", "default_category_id"),
    ("Default Subcategory ID", "default_subcategory_id"),
    ("Default Store Location", "default_store_location"),
]

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_COLOR = "bg-blue-500"
VALID_COLORS = frozenset(
    f"bg-{hue}-500"
    for hue in (
        "red", "orange", "amber", "yellow", "lime", "green", "emerald", "teal",
        "cyan", "sky", "blue", "indigo", "violet", "purple", "fuchsia", "pink",
        "rose", "slate",
    )
)


def generate_initials(name: str) -> str:
    """Upper-cased first letters of the first two words of a name."""
    return "".join(word[0] for word in name.split()).upper()[:2]


class _Batch:
    """Usernames and emails already taken, by existing users or earlier rows."""

    def __init__(self, existing_users: Sequence[User]):
        self.existing_usernames: Set[str] = {u.username.lower() for u in existing_users}
        self.existing_emails: Set[str] = {u.email.lower() for u in existing_users}
        self.usernames: Set[str] = set()
        self.emails: Set[str] = set()

    def check(self, username: str, email: str) -> Optional[str]:
        if username in self.usernames:
            return f'Duplicate username "{username}"'
        if email in self.emails:
            return f'Duplicate email "{email}"'
        if username in self.existing_usernames:
            return f'Username "{username}" already exists'
        if email in self.existing_emails:
            return f'Email "{email}" already exists'
        return None

    def add(self, user: User) -> None:
        self.usernames.add(user.username)
        self.emails.add(user.email)


def validate(
    records: Sequence[RawRecord],
    existing_users: Sequence[User],
    counter: Optional[IdCounter] = None,
) -> ImportResult[User]:
    """Validate user rows against each other and the existing users.

    Args:
        records: Decoded user rows.
        existing_users: Users already stored, for collision checks and id
            assignment.
        counter: Id counter; defaults to one past the largest existing id.

    Returns:
        ImportResult with the accepted users.
    """
    counter = counter or IdCounter.after(u.id for u in existing_users)
    batch = _Batch(existing_users)
    result = ImportResult()

    for record in records:
        try:
            user = _build_user(record, batch, counter)
        except RowError as error:
            result.row_errors.append(error)
            continue
        batch.add(user)
        result.valid.append(user)

    logger.info(
        f"User import: {len(result.valid)} accepted, "
        f"{len(result.row_errors)} rejected"
    )
    return result


def _build_user(record: RawRecord, batch: _Batch, counter: IdCounter) -> User:
    name = record.get("name").strip()
    username = record.get("username").strip().lower()
    email = record.get("email").strip().lower()

    if not name or not username or not email:
        raise RowError(record.row_number, "Name, Username, and Email are required")
    if not USERNAME_PATTERN.match(username):
        raise RowError(
            record.row_number,
            "Username must be 3-20 characters, letters, numbers, and underscores only",
        )
    if not EMAIL_PATTERN.match(email):
        raise RowError(record.row_number, "Invalid email format")

    conflict = batch.check(username, email)
    if conflict:
        raise RowError(record.row_number, conflict)

    color = record.get("color")
    if color not in VALID_COLORS:
        if color:
            logger.warning(
                f"Row {record.row_number}: Invalid color {color!r}, using default"
            )
        color = DEFAULT_COLOR

    avatar = record.get("avatar").strip()
    if not avatar or len(avatar) > 2:
        avatar = generate_initials(name)

    return User(
        id=counter.next(),
        name=name,
        username=username,
        email=email,
        avatar=avatar,
        color=color,
        is_active=True,
        default_category_id=record.get("default_category_id") or None,
        default_subcategory_id=record.get("default_subcategory_id") or None,
        default_store_location=record.get("default_store_location") or None,
    )


def ingest(
    text: str, existing_users: Sequence[User], counter: Optional[IdCounter] = None
) -> ImportResult[User]:
    """Decode user CSV text and validate it.

    Raises:
        FormatError: If the text has no data or misses required columns.
    """
    table = decode(text, COLUMNS)
    return validate(table.records, existing_users, counter).merge_errors(table.errors)
