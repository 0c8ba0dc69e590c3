from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from koszyk.domain.receipt import RawOcrInput
from koszyk.domain.shopping_list import ShoppingListItem
from koszyk.receipt.layout_profile import BUILTIN_PROFILES
from koszyk.runtime import receipt_server
from koszyk.runtime.list_storage import ShoppingListStore, get_list_store
from koszyk.runtime.ocr_client import HttpOcrClient, OCRServiceUnavailable, get_ocr_client


class _FakeOcrClient:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error

    def detect_text(self, image_bytes: bytes, filename: str = "receipt.jpg") -> RawOcrInput:
        if self.error is not None:
            raise self.error
        return RawOcrInput(full_text=self.text)


@pytest.fixture
def list_store(project_root) -> ShoppingListStore:
    return ShoppingListStore(project_root.shopping_lists)


@pytest.fixture
def ocr_client() -> _FakeOcrClient:
    return _FakeOcrClient()


@pytest.fixture
def client(list_store: ShoppingListStore, ocr_client: _FakeOcrClient) -> Iterator[TestClient]:
    app = receipt_server.app
    app.dependency_overrides[get_ocr_client] = lambda: ocr_client
    app.dependency_overrides[get_list_store] = lambda: list_store
    app.dependency_overrides[receipt_server.get_layout_profiles] = lambda: BUILTIN_PROFILES
    yield TestClient(app)
    app.dependency_overrides.clear()


def _upload(client: TestClient, content: bytes = b"jpeg-bytes", content_type: str = "image/jpeg"):
    return client.post("/receipts/upload", files={"receiptImage": ("receipt.jpg", content, content_type)})


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_creates_shopping_list(
    client: TestClient, ocr_client: _FakeOcrClient, list_store: ShoppingListStore, biedronka_receipt_text: str
) -> None:
    ocr_client.text = biedronka_receipt_text

    response = _upload(client)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["ocr_raw_text"] == biedronka_receipt_text
    assert body["parsed_data"]["store_name"] == "Biedronka 3125"
    assert [item["name"] for item in body["parsed_data"]["items"]] == ["MLEKO", "CHLEB RAZOWY"]
    shopping_list = list_store.get(body["shopping_list_id"])
    assert shopping_list is not None
    assert all(item.bought for item in shopping_list.items)


def test_upload_without_items_returns_parsed_data(client: TestClient, ocr_client: _FakeOcrClient) -> None:
    ocr_client.text = "Sklep\nSUMA PLN\n4,50"

    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["parsed_data"]["items"] == []
    assert "shopping_list_id" not in body


def test_upload_requires_file(client: TestClient) -> None:
    response = client.post("/receipts/upload", files={"other": ("r.jpg", b"x", "image/jpeg")})

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_upload_rejects_non_image(client: TestClient) -> None:
    response = _upload(client, content=b"%PDF", content_type="application/pdf")

    assert response.status_code == 400
    assert "Only image files" in response.json()["message"]


def test_upload_rejects_large_file(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(receipt_server, "MAX_UPLOAD_BYTES", 8)

    response = _upload(client, content=b"0123456789")

    assert response.status_code == 413


def test_upload_no_text_detected(client: TestClient) -> None:
    response = _upload(client)

    assert response.status_code == 400
    assert response.json()["message"] == "No text could be detected in the uploaded image."


def test_upload_ocr_unavailable(client: TestClient, ocr_client: _FakeOcrClient) -> None:
    ocr_client.error = OCRServiceUnavailable("connection refused")

    response = _upload(client)

    assert response.status_code == 502
    assert response.json() == {"status": "error", "message": "OCR service unavailable"}


def test_get_shopping_list(client: TestClient, list_store: ShoppingListStore) -> None:
    created = list_store.create("Paragon 25.12.2023", [ShoppingListItem(name="MLEKO", bought=True)])

    response = client.get(f"/lists/{created.id}")

    assert response.status_code == 200
    assert response.json()["items"] == [{"name": "MLEKO", "quantity": 1, "category": None, "bought": True}]


def test_get_unknown_shopping_list(client: TestClient) -> None:
    response = client.get(f"/lists/{'0' * 32}")

    assert response.status_code == 404


def test_upload_unreadable_image_is_rejected(client: TestClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("OCR service must not be called for unreadable images")

    receipt_server.app.dependency_overrides[get_ocr_client] = lambda: HttpOcrClient(
        "http://ocr.test", transport=httpx.MockTransport(handler)
    )

    response = _upload(client, content=b"not an image")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    assert body["status"] == "error"
    assert "not a readable image" in body["message"]
