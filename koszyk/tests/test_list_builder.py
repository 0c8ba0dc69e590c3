from datetime import date, datetime
from decimal import Decimal

from koszyk.domain.receipt import ParsedReceiptData, ParsedReceiptItem
from koszyk.receipt.list_builder import build_list_name, build_shopping_list_draft


def _parsed(**overrides: object) -> ParsedReceiptData:
    data = ParsedReceiptData(
        store_name="Biedronka 3125",
        purchase_date=datetime(2023, 12, 25, 14, 5, 30),
        items=[
            ParsedReceiptItem(name="MLEKO", quantity=1, total_price=Decimal("4.50"), category="Z paragonu"),
            ParsedReceiptItem(name="CHLEB", quantity=2, total_price=Decimal("6.40"), category=None),
        ],
    )
    for key, value in overrides.items():
        setattr(data, key, value)
    return data


def test_list_name_uses_store_and_purchase_date() -> None:
    assert build_list_name(_parsed()) == "Biedronka 3125 25.12.2023"


def test_list_name_falls_back_when_store_unknown() -> None:
    parsed = _parsed(store_name="Paragon", store_name_is_placeholder=True)

    assert build_list_name(parsed) == "Paragon 25.12.2023"


def test_list_name_uses_today_for_placeholder_date() -> None:
    parsed = _parsed(store_name="Paragon", store_name_is_placeholder=True, date_is_placeholder=True)

    assert build_list_name(parsed, today=date(2024, 2, 3)) == "Paragon 3.02.2024"


def test_draft_items_are_bought_with_default_category() -> None:
    draft = build_shopping_list_draft(_parsed())

    assert [(i.name, i.quantity, i.category, i.bought) for i in draft.items] == [
        ("MLEKO", 1, "Z paragonu", True),
        ("CHLEB", 2, "Z paragonu", True),
    ]


def test_list_date_day_is_not_zero_padded() -> None:
    parsed = _parsed(purchase_date=datetime(2023, 1, 5, 9, 0, 0))

    assert build_list_name(parsed) == "Biedronka 3125 5.01.2023"
