"""Runtime infrastructure for koszyk.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Layout profile loading via load_layout_profiles()

Usage:
    from koszyk.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.shopping_lists)
"""

from koszyk.runtime.layout_profiles import load_layout_profiles
from koszyk.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from koszyk.runtime.paths import (
    ProjectPaths,
    get_paths,
    set_project_root,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Layout profiles
    "load_layout_profiles",
    # Paths
    "get_paths",
    "set_project_root",
    "ProjectPaths",
]
