"""Parse raw OCR text into structured ParsedReceiptData."""

from collections.abc import Iterable
from datetime import datetime

from koszyk.domain.receipt import ParsedReceiptData, ParseWarning, RawOcrInput
from koszyk.runtime.logging import get_logger

from .errors import InvalidOcrInput
from .layout_profile import BUILTIN_PROFILES, ReceiptLayoutProfile, select_layout_profile
from .ocr_parser import (
    _extract_items,
    _extract_nip,
    _extract_purchase_date,
    _extract_store_name,
    _extract_total,
    split_lines,
)

logger = get_logger(__name__)


def parse_receipt_text(
    raw: RawOcrInput | str,
    profile: ReceiptLayoutProfile | None = None,
    now: datetime | None = None,
    profiles: Iterable[ReceiptLayoutProfile] = BUILTIN_PROFILES,
) -> ParsedReceiptData:
    """
    Parse OCR text of a receipt into structured data.

    This is a best-effort parser: fields that cannot be found are left as
    None, and only the store name and purchase date get fallbacks.

    Args:
        raw: OCR result (or its full text) for one receipt.
        profile: Layout profile to use. If None, one is picked from ``profiles``
            by looking for its brand marker in the text.
        now: Fallback purchase date when none is printed. Defaults to datetime.now().
        profiles: Candidate profiles for automatic selection.

    Returns:
        ParsedReceiptData for the receipt.

    Raises:
        InvalidOcrInput: If the OCR text is missing or not a string.
    """
    full_text = raw.full_text if isinstance(raw, RawOcrInput) else raw
    if not isinstance(full_text, str):
        raise InvalidOcrInput(f"OCR text must be a string, got {type(full_text).__name__}")

    lines = split_lines(full_text)
    if profile is None:
        profile = select_layout_profile(lines, profiles)
    logger.debug("Parsing %d OCR lines with layout profile %r", len(lines), profile.name)

    store_name = _extract_store_name(lines, profile)
    purchase_date = _extract_purchase_date(lines, profile)
    nip = _extract_nip(lines, profile)
    pairing = _extract_items(lines, profile)
    total_amount = _extract_total(lines, profile)

    warnings: list[ParseWarning] = []
    if not pairing.is_aligned:
        message = (
            f"Found {pairing.name_candidate_count} item names but {pairing.detail_group_count} "
            f"detail groups; kept the first {len(pairing.items)} pairs"
        )
        logger.warning("%s", message)
        warnings.append(ParseWarning(code="count_mismatch", message=message))

    date_is_placeholder = False
    if purchase_date is None:
        logger.warning("No purchase date found, using current time as fallback")
        purchase_date = now if now is not None else datetime.now()
        date_is_placeholder = True

    store_name_is_placeholder = False
    if store_name is None:
        store_name = profile.fallback_store_name
        store_name_is_placeholder = True

    return ParsedReceiptData(
        store_name=store_name,
        purchase_date=purchase_date,
        items=pairing.items,
        total_amount=total_amount,
        nip=nip,
        currency=profile.currency,
        store_name_is_placeholder=store_name_is_placeholder,
        date_is_placeholder=date_is_placeholder,
        name_candidate_count=pairing.name_candidate_count,
        detail_group_count=pairing.detail_group_count,
        warnings=warnings,
        raw_text=full_text,
    )
