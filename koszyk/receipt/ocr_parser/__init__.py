"""Composable OCR receipt parser components."""

from .common import parse_amount, parse_leading_int, split_lines
from .fields_parser import (
    _extract_nip,
    _extract_purchase_date,
    _extract_store_name,
    _extract_total,
)
from .items_parser import (
    DetailGroup,
    ItemPairing,
    _assemble_items,
    _collect_name_candidates,
    _extract_detail_groups,
    _extract_items,
    _find_detail_header_index,
    _pair_items,
)

__all__ = [
    "DetailGroup",
    "ItemPairing",
    "_assemble_items",
    "_collect_name_candidates",
    "_extract_detail_groups",
    "_extract_items",
    "_extract_nip",
    "_extract_purchase_date",
    "_extract_store_name",
    "_extract_total",
    "_find_detail_header_index",
    "_pair_items",
    "parse_amount",
    "parse_leading_int",
    "split_lines",
]
