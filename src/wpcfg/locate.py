# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the WordPress install and its ``wp-config.php``."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .errors import MissingConfigFileError

WP_LOAD_FILENAME: Final[str] = "wp-load.php"
WP_SETTINGS_FILENAME: Final[str] = "wp-settings.php"
DEFAULT_CONFIG_FILENAME: Final[str] = "wp-config.php"


def find_wordpress_root(start: Path) -> Path:
    """Return the closest directory at or above *start* holding ``wp-load.php``.

    Falls back to *start* itself when no WordPress core files are found.
    """

    resolved = start.resolve()
    for candidate in (resolved, *resolved.parents):
        if (candidate / WP_LOAD_FILENAME).is_file():
            return candidate
    return resolved


def locate_config(start: Path, *, filename: str = DEFAULT_CONFIG_FILENAME) -> Path:
    """Return the configuration file for the install containing *start*.

    The file may live in the WordPress root or one level above it, provided
    that parent directory is not itself a separate WordPress install.

    Raises:
        MissingConfigFileError: If neither location holds the file.
    """

    root = find_wordpress_root(start)
    direct = root / filename
    if direct.is_file():
        return direct
    parent = root.parent
    if (parent / filename).is_file() and not (parent / WP_SETTINGS_FILENAME).exists():
        return parent / filename
    raise MissingConfigFileError(filename)


__all__ = ["DEFAULT_CONFIG_FILENAME", "find_wordpress_root", "locate_config"]
