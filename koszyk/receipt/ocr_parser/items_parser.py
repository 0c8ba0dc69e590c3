"""Line-item extraction for receipts with a separate detail block.

Receipts in this layout print all product names first, then a column header
("PTU Ilość" / "Cena" / "Wartość") followed by four lines per item:
VAT code, quantity, unit price, line total. Names and detail groups are
paired by position.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal

from koszyk.domain.receipt import ParsedReceiptItem
from koszyk.receipt.layout_profile import ReceiptLayoutProfile
from koszyk.runtime.logging import get_logger

from .common import parse_amount, parse_leading_int

logger = get_logger(__name__)

DETAIL_GROUP_SIZE = 4
MIN_NAME_LENGTH = 2  # exclusive
MAX_NAME_LENGTH = 80  # exclusive

DetailGroup = tuple[str, str, str, str]

_QUANTITY_SUFFIX = re.compile(r"\s*x$", re.IGNORECASE)
_NUMERIC_CODE_PREFIX = re.compile(r"^\d{2,}")


def _find_detail_header_index(lines: list[str], profile: ReceiptLayoutProfile) -> int | None:
    """Return the index of the last detail column header line, or None."""
    vat_quantity, price, value = (h.upper() for h in profile.detail_header)
    for i in range(len(lines) - 2):
        if vat_quantity in lines[i].upper() and lines[i + 1].upper() == price and lines[i + 2].upper() == value:
            logger.debug("Detail header found at index %d", i + 2)
            return i + 2
    return None


def _extract_detail_groups(
    lines: list[str],
    header_index: int | None,
    profile: ReceiptLayoutProfile,
) -> list[DetailGroup]:
    """Chunk the lines after the detail header into 4-line groups until the total sentinel."""
    if header_index is None:
        return []

    stop_prefix = profile.detail_stop_prefix.upper()
    groups: list[DetailGroup] = []
    i = header_index + 1
    while i + DETAIL_GROUP_SIZE <= len(lines):
        if lines[i].upper().startswith(stop_prefix):
            break
        groups.append((lines[i], lines[i + 1], lines[i + 2], lines[i + 3]))
        i += DETAIL_GROUP_SIZE
    return groups


def _collect_name_candidates(
    lines: list[str],
    header_index: int | None,
    profile: ReceiptLayoutProfile,
) -> list[str]:
    """Collect product-name lines between the section marker and the detail header."""
    end = header_index if header_index is not None else len(lines)
    section_marker = profile.section_marker.upper()
    candidates: list[str] = []
    in_item_section = False

    for line in lines[:end]:
        if section_marker in line.upper():
            in_item_section = True
            continue
        if not in_item_section:
            continue

        match = profile.name_candidate_regex.match(line)
        if not match or not match.group(1):
            continue
        candidate = match.group(1).strip()
        if MIN_NAME_LENGTH < len(candidate) < MAX_NAME_LENGTH and not _NUMERIC_CODE_PREFIX.match(candidate):
            logger.debug("Potential item name: %r", candidate)
            candidates.append(candidate)

    return candidates


def _build_item(name: str, group: DetailGroup, profile: ReceiptLayoutProfile) -> ParsedReceiptItem:
    vat_token, quantity_token, unit_price_token, total_token = group

    quantity = parse_leading_int(_QUANTITY_SUFFIX.sub("", quantity_token).strip())
    if quantity is None or quantity < 1:
        quantity = 1

    total_price = parse_amount(total_token)
    return ParsedReceiptItem(
        name=name,
        quantity=quantity,
        price_per_unit=parse_amount(unit_price_token),
        total_price=total_price if total_price is not None else Decimal("NaN"),
        category=profile.default_category,
        vat_rate=vat_token.strip(),
    )


def _assemble_items(
    names: list[str],
    groups: list[DetailGroup],
    profile: ReceiptLayoutProfile,
) -> list[ParsedReceiptItem]:
    """Pair the k-th name with the k-th detail group; extra entries on either side are dropped."""
    items = [_build_item(name, group, profile) for name, group in zip(names, groups)]
    for item in items:
        logger.debug(
            "Added item: %s | qty %d | unit %s | total %s | VAT %s",
            item.name,
            item.quantity,
            item.price_per_unit,
            item.total_price,
            item.vat_rate,
        )
    return items


@dataclass(frozen=True)
class ItemPairing:
    """Items assembled from names and detail groups, with the counts they came from."""

    items: list[ParsedReceiptItem] = field(default_factory=list)
    name_candidate_count: int = 0
    detail_group_count: int = 0

    @property
    def is_aligned(self) -> bool:
        return self.name_candidate_count == self.detail_group_count


def _pair_items(
    names: list[str],
    groups: list[DetailGroup],
    profile: ReceiptLayoutProfile,
) -> ItemPairing:
    return ItemPairing(
        items=_assemble_items(names, groups, profile),
        name_candidate_count=len(names),
        detail_group_count=len(groups),
    )


def _extract_items(lines: list[str], profile: ReceiptLayoutProfile) -> ItemPairing:
    """Locate the detail block, collect names before it and pair them up."""
    header_index = _find_detail_header_index(lines, profile)
    groups = _extract_detail_groups(lines, header_index, profile)
    names = _collect_name_candidates(lines, header_index, profile)
    return _pair_items(names, groups, profile)
