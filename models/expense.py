from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ExpenseAttachment:
    id: str
    name: str
    type: str  # mime type
    size: int  # bytes
    data_url: str  # inline payload
    uploaded_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "dataUrl": self.data_url,
            "uploadedAt": self.uploaded_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExpenseAttachment":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            type=data.get("type", ""),
            size=int(data.get("size", 0)),
            data_url=data.get("dataUrl", ""),
            uploaded_at=data.get("uploadedAt", ""),
        )


@dataclass
class Expense:
    id: str  # caller-supplied, or a generated UUID
    user_id: str
    category_id: str
    subcategory_id: str
    amount: float
    description: str
    date: str  # YYYY-MM-DD
    created_at: str  # ISO timestamp
    notes: Optional[str] = None
    store_name: Optional[str] = None
    store_location: Optional[str] = None
    attachments: List[ExpenseAttachment] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert expense to its JSON representation."""
        data = {
            "id": self.id,
            "userId": self.user_id,
            "categoryId": self.category_id,
            "subcategoryId": self.subcategory_id,
            "amount": self.amount,
            "description": self.description,
            "date": self.date,
            "createdAt": self.created_at,
        }
        if self.notes:
            data["notes"] = self.notes
        if self.store_name:
            data["storeName"] = self.store_name
        if self.store_location:
            data["storeLocation"] = self.store_location
        if self.attachments:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        """Build an expense from its JSON representation."""
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            category_id=str(data.get("categoryId", "")),
            subcategory_id=str(data.get("subcategoryId", "")),
            amount=float(data.get("amount", 0)),
            description=data.get("description", ""),
            date=data.get("date", ""),
            created_at=data.get("createdAt", ""),
            notes=data.get("notes"),
            store_name=data.get("storeName"),
            store_location=data.get("storeLocation"),
            attachments=[
                ExpenseAttachment.from_dict(a) for a in data.get("attachments") or []
            ],
        )
