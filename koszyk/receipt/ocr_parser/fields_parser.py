"""Store name, purchase date, NIP and total extraction helpers."""

from datetime import datetime, timedelta
from decimal import Decimal

from koszyk.receipt.layout_profile import ReceiptLayoutProfile
from koszyk.runtime.logging import get_logger

from .common import parse_amount

logger = get_logger(__name__)


def _extract_store_name(lines: list[str], profile: ReceiptLayoutProfile) -> str | None:
    """
    Extract the store name from the receipt header.

    Strategy order (first match wins, scanning top to bottom):
    1. Full brand marker line -> "<Brand> <store number>" (or "<Brand>")
    2. Line starting with the bare brand marker -> "<Brand>"
    """
    full_marker = profile.full_brand_marker.upper()
    for line in lines:
        if full_marker in line.upper():
            match = profile.store_number_regex.search(line)
            if match:
                return f"{profile.brand} {match.group(1)}"
            return profile.brand

    brand_marker = profile.brand_marker.upper()
    for line in lines:
        if line.upper().startswith(brand_marker):
            return profile.brand

    return None


def _rolled_datetime(year: int, month: int, day: int, hour: int, minute: int, second: int) -> datetime:
    """Build a datetime, carrying out-of-range fields forward (31/02 -> 03/03)."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1) + timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)


def _extract_purchase_date(lines: list[str], profile: ReceiptLayoutProfile) -> datetime | None:
    """
    Return the first DD/MM/YYYY HH:MM:SS timestamp on the receipt (None if unknown).

    Only the first matching line is considered. Out-of-range values are rolled
    over into the following month/day/minute instead of being rejected.
    """
    for line in lines:
        match = profile.date_regex.search(line)
        if not match:
            continue
        day, month, year, hour, minute, second = (int(g) for g in match.groups())
        try:
            purchase_date = _rolled_datetime(year, month, day, hour, minute, second)
        except (ValueError, OverflowError):
            logger.debug("Unusable timestamp %r", match.group(0))
            return None
        logger.debug("Parsed date: %s", purchase_date.isoformat())
        return purchase_date
    return None


def _extract_nip(lines: list[str], profile: ReceiptLayoutProfile) -> str | None:
    """Return the merchant tax id (digits only) from the first NIP line."""
    for line in lines:
        match = profile.nip_regex.search(line)
        if match and match.group(1):
            nip = match.group(1).replace("-", "")
            logger.debug("Parsed NIP: %s", nip)
            return nip
    return None


def _extract_total(lines: list[str], profile: ReceiptLayoutProfile) -> Decimal | None:
    """Find the total marker, then take the first bare amount below it."""
    marker = profile.total_marker.upper()
    for i, line in enumerate(lines[:-1]):
        if marker not in line.upper():
            continue
        for candidate in lines[i + 1 :]:
            match = profile.amount_regex.match(candidate)
            if match:
                total = parse_amount(match.group(1))
                logger.debug("Parsed total amount: %s", total)
                return total
        return None
    return None
