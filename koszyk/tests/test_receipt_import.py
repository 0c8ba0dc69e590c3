from __future__ import annotations

import pytest

from koszyk.application.receipts import ReceiptImportRequest, run_receipt_import
from koszyk.domain.receipt import RawOcrInput
from koszyk.receipt.errors import InvalidReceiptImage
from koszyk.runtime.list_storage import ShoppingListStore, ShoppingListStoreError
from koszyk.runtime.ocr_client import OCRServiceUnavailable


class _FakeOcrClient:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.filenames: list[str] = []

    def detect_text(self, image_bytes: bytes, filename: str = "receipt.jpg") -> RawOcrInput:
        self.filenames.append(filename)
        if self.error is not None:
            raise self.error
        return RawOcrInput(full_text=self.text)


class _FailingStore(ShoppingListStore):
    def create(self, name, items):
        raise ShoppingListStoreError("disk full")


def _request(**kwargs: object) -> ReceiptImportRequest:
    return ReceiptImportRequest(image_bytes=b"img", filename="r.jpg", **kwargs)


def test_import_creates_bought_shopping_list(biedronka_receipt_text: str) -> None:
    store = ShoppingListStore()

    result = run_receipt_import(_request(), _FakeOcrClient(biedronka_receipt_text), store)

    assert result.status == "list_created"
    assert result.raw_text == biedronka_receipt_text
    shopping_list = store.get(result.shopping_list_id)
    assert shopping_list is not None
    assert shopping_list.name == "Biedronka 3125 25.12.2023"
    assert [(i.name, i.quantity, i.bought) for i in shopping_list.items] == [
        ("MLEKO", 1, True),
        ("CHLEB RAZOWY", 2, True),
    ]


def test_import_without_list_creation(biedronka_receipt_text: str) -> None:
    store = ShoppingListStore()

    result = run_receipt_import(_request(create_list=False), _FakeOcrClient(biedronka_receipt_text), store)

    assert result.status == "parsed"
    assert result.parsed is not None
    assert len(result.parsed.items) == 2
    assert store.list_ids() == []


@pytest.mark.parametrize("text", ["", "  \n\t "])
def test_import_no_text(text: str) -> None:
    result = run_receipt_import(_request(), _FakeOcrClient(text), ShoppingListStore())

    assert result.status == "no_text"
    assert result.parsed is None


def test_import_ocr_unavailable() -> None:
    ocr = _FakeOcrClient(error=OCRServiceUnavailable("connection refused"))

    result = run_receipt_import(_request(), ocr, ShoppingListStore())

    assert result.status == "ocr_unavailable"
    assert result.error == "connection refused"
    assert ocr.filenames == ["r.jpg"]


def test_import_no_items_does_not_create_list() -> None:
    store = ShoppingListStore()

    result = run_receipt_import(_request(), _FakeOcrClient("Sklep\nSUMA PLN\n4,50"), store)

    assert result.status == "no_items"
    assert result.parsed is not None
    assert store.list_ids() == []


def test_import_store_failure(biedronka_receipt_text: str) -> None:
    result = run_receipt_import(_request(), _FakeOcrClient(biedronka_receipt_text), _FailingStore())

    assert result.status == "store_failed"
    assert result.error == "disk full"
    assert result.parsed is not None


def test_import_invalid_image() -> None:
    ocr = _FakeOcrClient(error=InvalidReceiptImage("r.jpg is not a readable image."))

    result = run_receipt_import(_request(), ocr, ShoppingListStore())

    assert result.status == "invalid_image"
    assert result.error == "r.jpg is not a readable image."
    assert result.parsed is None
