"""Sequential identifier counters used when imports re-key entities.

Counters are owned by the caller and passed into the validators, so each
import run (and each test) starts from an explicit, known state.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional


def max_numeric_id(ids: Iterable[str]) -> int:
    """Return the largest id that parses as an integer, or 0 if none does."""
    highest = 0
    for value in ids:
        try:
            number = int(str(value).strip())
        except ValueError:
            continue
        highest = max(highest, number)
    return highest


class IdCounter:
    """Hands out numeric-string ids in increasing order."""

    def __init__(self, start: int = 1):
        self._next = start

    @classmethod
    def after(cls, ids: Iterable[str]) -> "IdCounter":
        """Create a counter starting one past the largest numeric id given."""
        return cls(max_numeric_id(ids) + 1)

    def next(self) -> str:
        value = str(self._next)
        self._next += 1
        return value


@dataclass
class CategoryCounters:
    """The two independent counters used by the category import."""

    categories: IdCounter = field(default_factory=IdCounter)
    subcategories: IdCounter = field(default_factory=IdCounter)

    @classmethod
    def after(cls, existing_categories: Optional[Iterable] = None) -> "CategoryCounters":
        """Seed both counters past the ids already used by existing categories."""
        existing_categories = list(existing_categories or [])
        return cls(
            categories=IdCounter.after(c.id for c in existing_categories),
            subcategories=IdCounter.after(
                sub.id for c in existing_categories for sub in c.subcategories
            ),
        )
