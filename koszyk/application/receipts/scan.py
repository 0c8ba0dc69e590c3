"""Receipt import workflow orchestration: image -> OCR -> parse -> shopping list."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from koszyk.receipt.errors import InvalidReceiptImage, NoTextDetected
from koszyk.receipt.layout_profile import BUILTIN_PROFILES, ReceiptLayoutProfile
from koszyk.receipt.list_builder import build_shopping_list_draft
from koszyk.receipt.ocr_result_parser import parse_receipt_text
from koszyk.runtime.list_storage import ShoppingListStoreError
from koszyk.runtime.logging import get_logger
from koszyk.runtime.ocr_client import OCRServiceUnavailable

if TYPE_CHECKING:
    from koszyk.domain.receipt import ParsedReceiptData, RawOcrInput
    from koszyk.runtime.list_storage import ShoppingListStore
    from koszyk.runtime.ocr_client import OcrClient

logger = get_logger(__name__)

ImportStatus = Literal[
    "ocr_unavailable",
    "invalid_image",
    "no_text",
    "no_items",
    "parsed",
    "list_created",
    "store_failed",
]


@dataclass(frozen=True)
class ReceiptImportRequest:
    """Inputs for running the receipt import workflow."""

    image_bytes: bytes
    filename: str = "receipt.jpg"
    create_list: bool = True
    profiles: Iterable[ReceiptLayoutProfile] = BUILTIN_PROFILES


@dataclass(frozen=True)
class ReceiptImportResult:
    """Outcome from the receipt import workflow."""

    status: ImportStatus
    parsed: ParsedReceiptData | None = None
    raw_text: str = ""
    shopping_list_id: str | None = None
    error: str | None = None


def _detect_text(ocr_client: OcrClient, request: ReceiptImportRequest) -> RawOcrInput:
    raw = ocr_client.detect_text(request.image_bytes, filename=request.filename)
    if not raw.full_text or not raw.full_text.strip():
        raise NoTextDetected("No text could be detected in the uploaded image.")
    return raw


def run_receipt_import(
    request: ReceiptImportRequest,
    ocr_client: OcrClient,
    list_store: ShoppingListStore,
) -> ReceiptImportResult:
    """Run import flow: OCR -> parse -> create a shopping list of bought items."""
    try:
        raw = _detect_text(ocr_client, request)
    except OCRServiceUnavailable as exc:
        return ReceiptImportResult(status="ocr_unavailable", error=str(exc))
    except InvalidReceiptImage as exc:
        return ReceiptImportResult(status="invalid_image", error=str(exc))
    except NoTextDetected as exc:
        logger.info("No text detected in %s", request.filename)
        return ReceiptImportResult(status="no_text", error=str(exc))

    parsed = parse_receipt_text(raw, profiles=request.profiles)
    logger.info(
        "Parsed %s: %s, %s, %d items",
        request.filename,
        parsed.store_name,
        parsed.total_amount,
        len(parsed.items),
    )

    if not parsed.items:
        logger.warning("No items were parsed from %s; not creating a shopping list", request.filename)
        return ReceiptImportResult(status="no_items", parsed=parsed, raw_text=raw.full_text)

    if not request.create_list:
        return ReceiptImportResult(status="parsed", parsed=parsed, raw_text=raw.full_text)

    draft = build_shopping_list_draft(parsed)
    try:
        shopping_list = list_store.create(draft.name, draft.items)
    except ShoppingListStoreError as exc:
        return ReceiptImportResult(status="store_failed", parsed=parsed, raw_text=raw.full_text, error=str(exc))

    return ReceiptImportResult(
        status="list_created",
        parsed=parsed,
        raw_text=raw.full_text,
        shopping_list_id=shopping_list.id,
    )
