"""Category and subcategory models for expense classification."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Subcategory:
    """A subdivision of a category.

    Attributes:
        id: Numeric string identifier.
        name: Name, unique within its category (case-insensitive).
        category_id: ID of the owning category.
    """

    id: str
    name: str
    category_id: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "categoryId": self.category_id}

    @classmethod
    def from_dict(cls, data: dict) -> "Subcategory":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            category_id=str(data.get("categoryId", "")),
        )


@dataclass
class Category:
    """Represents an expense category with its subcategories.

    Attributes:
        id: Numeric string identifier.
        name: Category name.
        icon: Icon token, e.g. "ShoppingCart".
        color: Text color token, e.g. "text-blue-600".
        subcategories: Ordered subcategories owned by this category.
    """

    id: str
    name: str
    icon: str
    color: str
    subcategories: List[Subcategory] = field(default_factory=list)

    def to_dict(self, include_subcategories: bool = True) -> dict:
        """Convert category to its JSON representation.

        Args:
            include_subcategories: False for the flattened backup shape.
        """
        data = {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
        }
        if include_subcategories:
            data["subcategories"] = [sub.to_dict() for sub in self.subcategories]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        category_id = str(data["id"])
        subcategories = []
        for sub in data.get("subcategories") or []:
            subcategories.append(
                Subcategory.from_dict({"categoryId": category_id, **sub})
            )
        return cls(
            id=category_id,
            name=data.get("name", ""),
            icon=data.get("icon", ""),
            color=data.get("color", ""),
            subcategories=subcategories,
        )
