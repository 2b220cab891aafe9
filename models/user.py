"""User model for the people (or projects, departments) expenses belong to."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """Represents someone expenses are recorded against.

    Attributes:
        id: Numeric string identifier.
        name: Display name.
        username: Unique, lower-cased, [a-z0-9_]{3,20}.
        email: Unique, lower-cased.
        avatar: One or two initials.
        color: Background color token, e.g. "bg-blue-500".
        is_active: Whether the user can be selected for new expenses.
        default_category_id: Category preselected in the expense form.
        default_subcategory_id: Subcategory preselected in the expense form.
        default_store_location: Store location preselected in the expense form.
    """

    id: str
    name: str
    username: str
    email: str
    avatar: str
    color: str
    is_active: bool = True
    default_category_id: Optional[str] = None
    default_subcategory_id: Optional[str] = None
    default_store_location: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert user to its JSON representation."""
        data = {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "avatar": self.avatar,
            "color": self.color,
            "isActive": self.is_active,
        }
        if self.default_category_id:
            data["defaultCategoryId"] = self.default_category_id
        if self.default_subcategory_id:
            data["defaultSubcategoryId"] = self.default_subcategory_id
        if self.default_store_location:
            data["defaultStoreLocation"] = self.default_store_location
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Build a user from its JSON representation."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            username=data.get("username", ""),
            email=data.get("email", ""),
            avatar=data.get("avatar", ""),
            color=data.get("color", ""),
            is_active=data.get("isActive", True),
            default_category_id=data.get("defaultCategoryId"),
            default_subcategory_id=data.get("defaultSubcategoryId"),
            default_store_location=data.get("defaultStoreLocation"),
        )
