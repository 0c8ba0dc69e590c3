"""FastAPI server for uploading receipt photos and reading back shopping lists."""

import re
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from koszyk.application.receipts.scan import ReceiptImportRequest, ReceiptImportResult, run_receipt_import
from koszyk.receipt.layout_profile import ReceiptLayoutProfile
from koszyk.runtime.layout_profiles import load_layout_profiles
from koszyk.runtime.list_storage import ShoppingListStore, ShoppingListStoreError, get_list_store
from koszyk.runtime.logging import get_logger
from koszyk.runtime.ocr_client import OcrClient, get_ocr_client
from koszyk.runtime.paths import get_paths

logger = get_logger(__name__)

UPLOAD_FIELD = "receiptImage"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_IMAGE_TYPE = re.compile(r"/(jpg|jpeg|png|gif)$")


def get_layout_profiles() -> tuple[ReceiptLayoutProfile, ...]:
    return load_layout_profiles()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create data directories on startup."""
    get_paths().ensure_data_directories()
    yield


app = FastAPI(title="Koszyk", lifespan=lifespan)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _import_response(result: ReceiptImportResult) -> JSONResponse:
    if result.status == "ocr_unavailable":
        logger.error("OCR failed: %s", result.error)
        return _error("OCR service unavailable", 502)
    if result.status == "invalid_image":
        return _error(result.error or "Uploaded file is not a readable image.", 400)
    if result.status == "no_text":
        return _error(result.error or "No text could be detected in the uploaded image.", 400)
    if result.status == "store_failed":
        logger.error("Shopping list creation failed: %s", result.error)
        return _error("Receipt processing failed", 500)

    assert result.parsed is not None
    body: dict[str, Any] = {
        "status": "success",
        "ocr_raw_text": result.raw_text,
        "parsed_data": result.parsed.to_dict(),
    }
    if result.status == "list_created":
        body["message"] = "Receipt processed and shopping list created."
        body["shopping_list_id"] = result.shopping_list_id
        return JSONResponse(body, status_code=201)

    body["message"] = "Receipt processed, but no items could be reliably parsed to create a shopping list."
    return JSONResponse(body)


@app.post("/receipts/upload")
async def upload_receipt(
    request: Request,
    ocr_client: OcrClient = Depends(get_ocr_client),
    list_store: ShoppingListStore = Depends(get_list_store),
    profiles: tuple[ReceiptLayoutProfile, ...] = Depends(get_layout_profiles),
) -> JSONResponse:
    """Receive a receipt image, OCR it and create a shopping list of the bought items."""
    form = await request.form()
    file = form.get(UPLOAD_FIELD)
    if file is None or not hasattr(file, "read"):
        return _error("Receipt image file is required.", 400)

    content_type = getattr(file, "content_type", None) or ""
    if not ALLOWED_IMAGE_TYPE.search(content_type):
        return _error("Only image files are allowed! (jpg, jpeg, png, gif)", 400)

    contents = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(contents) > MAX_UPLOAD_BYTES:
        return _error("File too large (max 10 MB).", 413)

    filename = getattr(file, "filename", None) or "receipt.jpg"
    logger.info("Uploaded file: %s %s %d bytes", filename, content_type, len(contents))

    result = await run_in_threadpool(
        run_receipt_import,
        ReceiptImportRequest(image_bytes=contents, filename=filename, profiles=profiles),
        ocr_client,
        list_store,
    )
    return _import_response(result)


@app.get("/lists/{list_id}")
async def get_shopping_list(
    list_id: str,
    list_store: ShoppingListStore = Depends(get_list_store),
) -> JSONResponse:
    """Return a shopping list created from a receipt."""
    try:
        shopping_list = list_store.get(list_id)
    except ShoppingListStoreError as e:
        logger.error("%s", e)
        return _error("Failed to read shopping list", 500)
    if shopping_list is None:
        return _error(f"Shopping list {list_id} not found", 404)
    return JSONResponse(shopping_list.to_dict())


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
