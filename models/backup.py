"""Backup document model.

The model is deliberately shallow: it checks the top-level shape of a backup
and carries the entity records as plain JSON dictionaries.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class BackupDocument(BaseModel):
    """Complete snapshot of the persisted application state."""

    model_config = ConfigDict(extra="ignore")

    version: str = Field(min_length=1)
    timestamp: str = Field(min_length=1)
    users: List[Any]
    categories: List[Any]
    subcategories: List[Any] = Field(default_factory=list)
    expenses: List[Any]
    credentials: Any
    settings: Any
    use_case: Any = Field(alias="useCase")

    def to_json_dict(self) -> dict:
        """Return the document with its external key names, in file order."""
        return self.model_dump(by_alias=True)
