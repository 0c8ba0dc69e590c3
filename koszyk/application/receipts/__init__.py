"""Receipt workflows."""

from koszyk.application.receipts.scan import ReceiptImportRequest, ReceiptImportResult, run_receipt_import

__all__ = [
    "ReceiptImportRequest",
    "ReceiptImportResult",
    "run_receipt_import",
]
