"""Data models for receipt OCR parsing."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class RawOcrInput:
    """Text and optional layout annotation returned by an OCR provider."""

    full_text: str
    layout: Any | None = None


@dataclass(frozen=True)
class ParsedReceiptItem:
    """A single line item recovered from a receipt."""

    name: str
    total_price: Decimal
    quantity: int = 1
    price_per_unit: Decimal | None = None
    category: str | None = None
    vat_rate: str | None = None

    @property
    def has_valid_total(self) -> bool:
        # total_price is NaN when the detail line could not be parsed.
        return not self.total_price.is_nan()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "price_per_unit": _decimal_to_json(self.price_per_unit),
            "total_price": _decimal_to_json(self.total_price),
            "category": self.category,
            "vat_rate": self.vat_rate,
        }


@dataclass(frozen=True)
class ParseWarning:
    """Non-fatal parser diagnostic surfaced to callers."""

    code: str
    message: str


@dataclass
class ParsedReceiptData:
    """Structured receipt data produced by the parser."""

    store_name: str | None = None
    purchase_date: datetime | None = None
    items: list[ParsedReceiptItem] = field(default_factory=list)
    total_amount: Decimal | None = None
    nip: str | None = None
    currency: str = "PLN"
    store_name_is_placeholder: bool = False
    date_is_placeholder: bool = False
    name_candidate_count: int = 0
    detail_group_count: int = 0
    warnings: list[ParseWarning] = field(default_factory=list)
    raw_text: str = ""  # Original OCR text for reference

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (decimals as floats, dates as ISO 8601)."""
        return {
            "store_name": self.store_name,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "items": [item.to_dict() for item in self.items],
            "total_amount": _decimal_to_json(self.total_amount),
            "nip": self.nip,
            "currency": self.currency,
            "store_name_is_placeholder": self.store_name_is_placeholder,
            "date_is_placeholder": self.date_is_placeholder,
            "name_candidate_count": self.name_candidate_count,
            "detail_group_count": self.detail_group_count,
            "warnings": [{"code": w.code, "message": w.message} for w in self.warnings],
        }


def _decimal_to_json(value: Decimal | None) -> float | None:
    if value is None or value.is_nan():
        return None
    return float(value)
