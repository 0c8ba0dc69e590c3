"""Runtime loader for receipt layout profiles."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path

from koszyk.receipt.layout_profile import BUILTIN_PROFILES, ReceiptLayoutProfile, profile_from_mapping
from koszyk.runtime.logging import get_logger
from koszyk.runtime.paths import get_paths

logger = get_logger(__name__)


def load_layout_profiles(config_path: str | None = None) -> tuple[ReceiptLayoutProfile, ...]:
    """
    Load layout profiles from layout_profiles.toml, after the built-in ones.

    The file holds ``[[profiles]]`` tables; keys not given in a table fall back
    to the default (Biedronka) profile values. A table whose ``name`` matches a
    built-in profile replaces it.

    Args:
        config_path: Optional TOML path override. If None, uses the default project path.

    Returns:
        Tuple of profiles in selection order.
    """
    path = Path(config_path) if config_path is not None else get_paths().layout_profiles
    return _load_layout_profiles_cached(str(path))


@lru_cache(maxsize=4)
def _load_layout_profiles_cached(config_path: str) -> tuple[ReceiptLayoutProfile, ...]:
    path = Path(config_path)
    if not path.exists():
        return BUILTIN_PROFILES

    with open(path, "rb") as f:
        config = tomllib.load(f)

    loaded = [profile_from_mapping(table) for table in config.get("profiles", [])]
    loaded_names = {profile.name for profile in loaded}
    profiles = [p for p in BUILTIN_PROFILES if p.name not in loaded_names] + loaded
    logger.debug("Loaded %d layout profiles from %s", len(loaded), path)
    return tuple(profiles)
