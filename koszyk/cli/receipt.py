"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from koszyk.domain.receipt import ParsedReceiptData, RawOcrInput
from koszyk.receipt.errors import InvalidOcrInput
from koszyk.receipt.ocr_helpers import detections_to_full_text
from koszyk.runtime import get_logger, load_layout_profiles

logger = get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receiving receipt uploads."""
    import uvicorn

    from koszyk.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Upload endpoint: http://{args.host}:{args.port}/receipts/upload (field: {server.UPLOAD_FIELD})")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def _load_ocr_input(path: Path) -> RawOcrInput:
    """Read OCR output saved as plain text or as OCR service JSON."""
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() != ".json":
        return RawOcrInput(full_text=content)

    data = json.loads(content)
    if "full_text" in data:
        return RawOcrInput(full_text=data["full_text"], layout=data.get("pages"))
    if "detections" in data:
        return RawOcrInput(full_text=detections_to_full_text(data["detections"]), layout=data["detections"])
    raise InvalidOcrInput(f"{path} has neither 'full_text' nor 'detections'")


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse saved OCR output and print the structured result as JSON."""
    from koszyk.receipt.ocr_result_parser import parse_receipt_text

    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}")
        sys.exit(1)

    profiles = load_layout_profiles()
    profile = None
    if args.profile:
        by_name = {p.name: p for p in profiles}
        if args.profile not in by_name:
            print(f"Unknown layout profile: {args.profile} (known: {', '.join(sorted(by_name))})")
            sys.exit(1)
        profile = by_name[args.profile]

    try:
        raw = _load_ocr_input(path)
        parsed = parse_receipt_text(raw, profile=profile, profiles=profiles)
    except ValueError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        sys.exit(1)

    print(json.dumps(parsed.to_dict(), indent=2, ensure_ascii=False))


def _print_parsed_receipt(parsed: ParsedReceiptData) -> None:
    print("\n" + "=" * 60)
    print("PARSED RECEIPT")
    print("=" * 60)
    print(f"Store: {parsed.store_name}")
    date_str = "UNKNOWN"
    if parsed.purchase_date is not None and not parsed.date_is_placeholder:
        date_str = parsed.purchase_date.isoformat()
    print(f"Date: {date_str}")
    if parsed.nip:
        print(f"NIP: {parsed.nip}")
    if parsed.total_amount is not None:
        print(f"Total: {parsed.total_amount:.2f} {parsed.currency}")
    print(f"\nItems ({len(parsed.items)}):")
    for i, item in enumerate(parsed.items, 1):
        qty_str = f" x{item.quantity}" if item.quantity > 1 else ""
        total_str = f"{item.total_price:.2f}" if item.has_valid_total else "?"
        print(f"  {i}. {item.name}{qty_str} - {total_str} [{item.vat_rate}]")
    for warning in parsed.warnings:
        print(f"Warning: {warning.message}")
    print("=" * 60)


def cmd_scan(args: argparse.Namespace) -> None:
    """OCR a receipt image, print the parsed data and create a shopping list."""
    from koszyk.application.receipts.scan import ReceiptImportRequest, run_receipt_import
    from koszyk.runtime.list_storage import get_list_store
    from koszyk.runtime.ocr_client import HttpOcrClient, OcrClient, VisionOcrClient

    image_path = Path(args.image)
    if not image_path.exists():
        logger.error("Receipt file not found: %s", image_path)
        print(f"Error: Receipt file not found: {image_path}")
        sys.exit(1)

    ocr_client: OcrClient = VisionOcrClient() if args.backend == "vision" else HttpOcrClient(args.ocr_url)
    result = run_receipt_import(
        ReceiptImportRequest(
            image_bytes=image_path.read_bytes(),
            filename=image_path.name,
            create_list=not args.no_list,
            profiles=load_layout_profiles(),
        ),
        ocr_client=ocr_client,
        list_store=get_list_store(),
    )

    if result.status == "ocr_unavailable":
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    if result.status in ("invalid_image", "no_text"):
        print(f"Error: {result.error}")
        sys.exit(1)

    assert result.parsed is not None
    _print_parsed_receipt(result.parsed)

    if result.status == "no_items":
        print("No items could be parsed; no shopping list was created.")
        return

    if result.status == "store_failed":
        print(f"Failed to create shopping list: {result.error}")
        sys.exit(1)

    if result.status == "list_created":
        print(f"\nCreated shopping list: {result.shopping_list_id}")
