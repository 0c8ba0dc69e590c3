"""Centralized path management for koszyk.

All data and configuration paths are resolved from a single root so the
server, the CLI and the tests agree on where things live.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the data root: $KOSZYK_HOME, else the current directory."""
    env_root = os.environ.get("KOSZYK_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    All paths are computed relative to the root, so they stay consistent
    regardless of the module that asks for them.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def layout_profiles(self) -> Path:
        """Additional receipt layout profiles TOML file."""
        return self.config / "layout_profiles.toml"

    # --- Data paths ---
    @property
    def data(self) -> Path:
        """Root data directory."""
        return self.root / "data"

    @property
    def shopping_lists(self) -> Path:
        """Shopping lists created from receipts (one JSON file per list)."""
        return self.data / "shopping_lists"

    @property
    def receipts(self) -> Path:
        """Uploaded receipt images."""
        return self.data / "receipts"

    def ensure_data_directories(self) -> None:
        """Create all data directories if they don't exist."""
        self.shopping_lists.mkdir(parents=True, exist_ok=True)
        self.receipts.mkdir(parents=True, exist_ok=True)


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_project_root(root: Path | str) -> ProjectPaths:
    """Point the singleton at a different root (used by the CLI and tests)."""
    global _paths
    _paths = ProjectPaths(root=Path(root))
    return _paths
