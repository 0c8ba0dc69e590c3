"""Data models for shopping lists."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ShoppingListItem:
    name: str
    quantity: int = 1
    category: str | None = None
    bought: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "bought": self.bought,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShoppingListItem":
        return cls(
            name=str(data["name"]),
            quantity=int(data.get("quantity", 1)),
            category=data.get("category"),
            bought=bool(data.get("bought", False)),
        )


@dataclass
class ShoppingList:
    """A persisted shopping list."""

    id: str
    name: str
    items: list[ShoppingListItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShoppingList":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            items=[ShoppingListItem.from_dict(item) for item in data.get("items", [])],
            created_at=datetime.fromisoformat(data["created_at"]),
        )
