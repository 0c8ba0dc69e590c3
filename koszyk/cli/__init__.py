"""Unified command-line interface for koszyk.

Usage:
    koszyk parse <ocr_text_or_json>
    koszyk scan <image> [--ocr-url URL] [--no-list]
    koszyk serve [--host] [--port]
"""
