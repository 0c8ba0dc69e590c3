"""Turn parsed receipt data into a shopping-list creation request."""

from dataclasses import dataclass, field
from datetime import date

from koszyk.domain.receipt import ParsedReceiptData
from koszyk.domain.shopping_list import ShoppingListItem
from koszyk.receipt.layout_profile import DEFAULT_PROFILE

DEFAULT_CATEGORY = DEFAULT_PROFILE.default_category
FALLBACK_LIST_PREFIX = DEFAULT_PROFILE.fallback_store_name


@dataclass(frozen=True)
class ShoppingListDraft:
    """Name and items of a shopping list that has not been stored yet."""

    name: str
    items: list[ShoppingListItem] = field(default_factory=list)


def format_list_date(value: date) -> str:
    """Polish locale short date: day without padding, e.g. 5.01.2023."""
    return f"{value.day}.{value:%m.%Y}"


def build_list_name(parsed: ParsedReceiptData, today: date | None = None) -> str:
    """
    Name a list after the store and purchase date.

    "Biedronka 1234 25.12.2023" when the store was recognized, otherwise
    "Paragon 25.12.2023". Placeholder purchase dates are replaced by today.
    """
    if parsed.purchase_date is not None and not parsed.date_is_placeholder:
        list_date = parsed.purchase_date.date()
    else:
        list_date = today or date.today()

    if parsed.store_name and not parsed.store_name_is_placeholder:
        return f"{parsed.store_name} {format_list_date(list_date)}"
    return f"{FALLBACK_LIST_PREFIX} {format_list_date(list_date)}"


def build_shopping_list_draft(parsed: ParsedReceiptData, today: date | None = None) -> ShoppingListDraft:
    """Map parsed receipt items to bought shopping-list items."""
    items = [
        ShoppingListItem(
            name=item.name,
            quantity=item.quantity,
            category=item.category or DEFAULT_CATEGORY,
            bought=True,
        )
        for item in parsed.items
    ]
    return ShoppingListDraft(name=build_list_name(parsed, today=today), items=items)
