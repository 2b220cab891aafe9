from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

from ingestion.errors import RowError

T = TypeVar("T")


@dataclass
class ImportResult(Generic[T]):
    """Accepted entities of an import together with the rejected rows."""

    valid: List[T] = field(default_factory=list)
    row_errors: List[RowError] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        """Row errors rendered as "Row {n}: {reason}" strings."""
        return [str(error) for error in self.row_errors]

    def merge_errors(self, row_errors: List[RowError]) -> "ImportResult[T]":
        """Add decoder errors and keep all errors ordered by row number."""
        self.row_errors = sorted(
            [*self.row_errors, *row_errors], key=lambda error: error.row_number
        )
        return self
