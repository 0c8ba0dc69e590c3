"""Exceptions raised by the receipt parsing pipeline."""


class InvalidOcrInput(ValueError):
    """Raised when the parser is handed something that is not OCR text."""


class NoTextDetected(ValueError):
    """Raised when OCR produced no usable text for a receipt image."""


class InvalidReceiptImage(ValueError):
    """Raised when uploaded bytes cannot be decoded as an image."""
