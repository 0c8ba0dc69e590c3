"""OCR clients that turn a receipt image into RawOcrInput.

Two backends are available:

- ``http``: a self-hosted OCR service exposing ``POST /ocr`` (multipart ``file``)
  that answers with ``full_text``/``pages`` or PaddleOCR ``detections``.
- ``vision``: Google Cloud Vision document text detection.

The backend is chosen with KOSZYK_OCR_BACKEND; ``get_ocr_client()`` returns a
process-wide instance.
"""

import os
import time
from functools import lru_cache
from typing import Any, Protocol

import httpx

from koszyk.domain.receipt import RawOcrInput
from koszyk.receipt.errors import InvalidReceiptImage
from koszyk.receipt.ocr_helpers import detections_to_full_text, resize_image_bytes
from koszyk.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_SERVICE_URL = "http://localhost:8001"
DEFAULT_LANGUAGE_HINTS = ("pl", "en")


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR provider cannot be reached or returns an error."""


class OcrClient(Protocol):
    def detect_text(self, image_bytes: bytes, filename: str = "receipt.jpg") -> RawOcrInput: ...


class HttpOcrClient:
    """Client for the self-hosted OCR service."""

    def __init__(
        self,
        base_url: str = DEFAULT_OCR_SERVICE_URL,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
        resize: bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.resize = resize
        self._transport = transport

    def detect_text(self, image_bytes: bytes, filename: str = "receipt.jpg") -> RawOcrInput:
        logger.info("Sending receipt to OCR service at %s...", self.base_url)
        payload = image_bytes
        if self.resize:
            try:
                payload = resize_image_bytes(image_bytes)
            except OSError as e:
                logger.warning("Could not decode %s as an image: %s", filename, e)
                raise InvalidReceiptImage(f"{filename} is not a readable image.") from e

        try:
            start_time = time.time()
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self.base_url}/ocr",
                    files={"file": (filename, payload, "image/jpeg")},
                )
            logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
        except httpx.RequestError as e:
            logger.error("Failed to connect to OCR service: %s", e)
            raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

        if response.status_code != 200:
            logger.error("OCR service error: %s", response.status_code)
            raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise OCRServiceUnavailable("OCR service returned invalid JSON") from e
        return _raw_input_from_service_result(result)


def _raw_input_from_service_result(result: dict[str, Any]) -> RawOcrInput:
    if "full_text" in result:
        return RawOcrInput(full_text=result.get("full_text") or "", layout=result.get("pages"))
    if "detections" in result:
        detections = result.get("detections") or []
        return RawOcrInput(full_text=detections_to_full_text(detections), layout=detections)
    raise OCRServiceUnavailable("OCR service response has neither 'full_text' nor 'detections'")


class VisionOcrClient:
    """Google Cloud Vision document text detection with language hints."""

    def __init__(self, language_hints: tuple[str, ...] = DEFAULT_LANGUAGE_HINTS, client: Any | None = None) -> None:
        self.language_hints = language_hints
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            from google.cloud import vision

            self._client = vision.ImageAnnotatorClient()
            logger.info("Google Cloud Vision client initialized")
        return self._client

    def detect_text(self, image_bytes: bytes, filename: str = "receipt.jpg") -> RawOcrInput:
        from google.api_core import exceptions as google_exceptions
        from google.cloud import vision

        logger.info("Sending %s to Google Cloud Vision for text detection...", filename)
        try:
            response = self._get_client().document_text_detection(
                image=vision.Image(content=image_bytes),
                image_context=vision.ImageContext(language_hints=list(self.language_hints)),
            )
        except google_exceptions.GoogleAPIError as e:
            logger.error("Google Cloud Vision request failed: %s", e)
            raise OCRServiceUnavailable(f"Vision API request failed: {e}") from e

        if response.error.message:
            raise OCRServiceUnavailable(f"Vision API error: {response.error.message}")

        annotation = response.full_text_annotation
        if not annotation or not annotation.text:
            return RawOcrInput(full_text="", layout=None)
        return RawOcrInput(full_text=annotation.text, layout=annotation)


@lru_cache(maxsize=1)
def get_ocr_client() -> OcrClient:
    """Return the process-wide OCR client selected by KOSZYK_OCR_BACKEND."""
    backend = os.environ.get("KOSZYK_OCR_BACKEND", "http").lower()
    if backend == "vision":
        return VisionOcrClient()
    if backend == "http":
        return HttpOcrClient(os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL))
    raise ValueError(f"Unknown KOSZYK_OCR_BACKEND: {backend!r} (expected 'http' or 'vision')")
