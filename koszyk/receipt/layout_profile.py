"""Receipt layout profiles: marker strings and patterns for one receipt format.

A profile bundles everything the line parser needs to know about a merchant's
printed layout (brand header, section banner, detail column headers, total
sentinel, product-name exclusions). Adding a receipt format means adding a
profile, either in code or in ``config/layout_profiles.toml``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, fields
from functools import cached_property
from typing import Any

# Characters allowed in a product name (letters incl. Polish diacritics, digits, a little punctuation).
NAME_CHARACTERS = r"A-ZĄĆĘŁŃÓŚŹŻ\s\d.\-/\"()%"


@dataclass(frozen=True)
class ReceiptLayoutProfile:
    """Markers and patterns describing one printed receipt layout."""

    name: str
    brand: str
    brand_marker: str
    full_brand_marker: str
    store_number_digits: int = 4
    section_marker: str = "PARAGON FISKALNY"
    detail_header: tuple[str, str, str] = ("PTU ILOŚĆ", "CENA", "WARTOŚĆ")
    detail_stop_prefix: str = "SUMA"
    total_marker: str = "SUMA PLN"
    # Regex fragments; a line starting with any of them is never a product name.
    excluded_name_prefixes: tuple[str, ...] = (
        r"PTU\s+Ilość",
        r"Cena",
        r"Wartość",
        r"PARAGON FISKALNY",
        r"SUMA",
        r"SPRZEDAŻ OPODATKOWANA",
        r"KARTA PŁATNICZA",
        r"NIP\s",
        r"DATA\s",
        r"NAZWA\s",
        r"NR:",
        r"CODZIENNIE NISKIE CENY",
    )
    unit_tokens: tuple[str, ...] = ("g", "kg", "ml", "l", r"szt\.?")
    date_pattern: str = r"(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2}):(\d{2})"
    nip_pattern: str = r"NIP\s*(\d{10}|\d{3}-\d{3}-\d{2}-\d{2})"
    amount_pattern: str = r"^(\d+[,.]\d{2})$"
    default_category: str = "Z paragonu"
    fallback_store_name: str = "Paragon"
    currency: str = "PLN"

    @cached_property
    def store_number_regex(self) -> re.Pattern[str]:
        return re.compile(
            re.escape(self.brand_marker) + r".*?(\d{" + str(self.store_number_digits) + r"})"
        )

    @cached_property
    def name_candidate_regex(self) -> re.Pattern[str]:
        excluded = "|".join([*self.excluded_name_prefixes, re.escape(self.brand_marker)])
        units = "|".join(self.unit_tokens)
        return re.compile(
            rf"^(?!{excluded})([{NAME_CHARACTERS}]+?)(?:\s+\d+[,.]?\d*\s*(?:{units}))?$",
            re.IGNORECASE,
        )

    @cached_property
    def date_regex(self) -> re.Pattern[str]:
        return re.compile(self.date_pattern)

    @cached_property
    def nip_regex(self) -> re.Pattern[str]:
        return re.compile(self.nip_pattern)

    @cached_property
    def amount_regex(self) -> re.Pattern[str]:
        return re.compile(self.amount_pattern)


BIEDRONKA_PROFILE = ReceiptLayoutProfile(
    name="biedronka",
    brand="Biedronka",
    brand_marker="BIEDRONKA",
    full_brand_marker='BIEDRONKA "CODZIENNIE NISKIE CENY"',
)

DEFAULT_PROFILE = BIEDRONKA_PROFILE

BUILTIN_PROFILES: tuple[ReceiptLayoutProfile, ...] = (BIEDRONKA_PROFILE,)

_TUPLE_FIELDS = {"detail_header", "excluded_name_prefixes", "unit_tokens"}


def profile_from_mapping(
    data: Mapping[str, Any],
    base: ReceiptLayoutProfile = DEFAULT_PROFILE,
) -> ReceiptLayoutProfile:
    """
    Build a profile from a TOML table, filling unspecified keys from ``base``.

    Raises:
        ValueError: If the table is missing ``name``, has unknown keys, or
            declares a detail header that is not exactly three strings.
    """
    known = {f.name for f in fields(ReceiptLayoutProfile)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown layout profile keys: {', '.join(sorted(unknown))}")
    if "name" not in data:
        raise ValueError("Layout profile is missing required key 'name'")

    values: dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(ReceiptLayoutProfile)}
    for key, value in data.items():
        values[key] = tuple(value) if key in _TUPLE_FIELDS else value

    if len(values["detail_header"]) != 3:
        raise ValueError(f"Layout profile {values['name']!r}: detail_header must have exactly 3 entries")

    return ReceiptLayoutProfile(**values)


def select_layout_profile(
    lines: Sequence[str],
    profiles: Iterable[ReceiptLayoutProfile] = BUILTIN_PROFILES,
) -> ReceiptLayoutProfile:
    """Pick the first profile whose brand marker appears on any line, else the default."""
    upper_lines = [line.upper() for line in lines]
    for profile in profiles:
        marker = profile.brand_marker.upper()
        if any(marker in line for line in upper_lines):
            return profile
    return DEFAULT_PROFILE
