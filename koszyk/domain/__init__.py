"""Core domain models for koszyk.

- RawOcrInput, ParsedReceiptData, ParsedReceiptItem: receipt parsing models
- ShoppingList, ShoppingListItem: shopping list models

Usage:
    from koszyk.domain import ParsedReceiptData, ShoppingList
"""

from koszyk.domain.receipt import ParsedReceiptData, ParsedReceiptItem, ParseWarning, RawOcrInput
from koszyk.domain.shopping_list import ShoppingList, ShoppingListItem

__all__ = [
    "ParseWarning",
    "ParsedReceiptData",
    "ParsedReceiptItem",
    "RawOcrInput",
    "ShoppingList",
    "ShoppingListItem",
]
