#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Callable, Sequence

from koszyk.runtime.ocr_client import DEFAULT_OCR_SERVICE_URL


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Koszyk receipt and shopping list utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file>               Parse OCR text (or OCR JSON) and print structured data
  scan <image>               OCR a receipt image and create a shopping list
  serve [--host] [--port]    Start receipt upload server

Notes:
  data/shopping_lists/       = shopping lists created from receipts
  config/layout_profiles.toml = extra receipt layout profiles
""",
    )
    parser.add_argument("--home", default=None, help="Data root directory (default: $KOSZYK_HOME or cwd)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse OCR text into structured receipt data")
    parse_parser.add_argument("file", help="OCR text file, or JSON with 'full_text' or 'detections'")
    parse_parser.add_argument("--profile", default=None, help="Layout profile name (auto-detect if omitted)")

    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument(
        "--ocr-url",
        default=DEFAULT_OCR_SERVICE_URL,
        help=f"OCR service URL (default: {DEFAULT_OCR_SERVICE_URL})",
    )
    scan_parser.add_argument(
        "--backend",
        choices=["http", "vision"],
        default="http",
        help="OCR backend: self-hosted OCR service or Google Cloud Vision (default: http)",
    )
    scan_parser.add_argument("--no-list", action="store_true", help="Only print parsed data, do not create a list")

    serve_parser = subparsers.add_parser("serve", help="Start receipt upload server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        from koszyk.runtime import set_log_level

        set_log_level(logging.DEBUG)

    if args.home:
        from koszyk.runtime.paths import set_project_root

        set_project_root(args.home)

    if args.command == "parse":
        from koszyk.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "scan":
        from koszyk.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "serve":
        from koszyk.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
