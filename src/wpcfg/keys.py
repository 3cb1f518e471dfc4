# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Supported configuration keys and their external option names."""

from __future__ import annotations

from enum import Enum
from typing import Final


class ConfigKey(Enum):
    """Configuration entries the updater knows how to rewrite.

    Member values are the literal tokens that appear in ``wp-config.php``.
    Declaration order matters: it pairs positionally with :data:`OPTION_NAMES`.
    """

    DB_NAME = "DB_NAME"
    DB_USER = "DB_USER"
    DB_PASSWORD = "DB_PASSWORD"
    DB_HOST = "DB_HOST"
    TABLE_PREFIX = "table_prefix"
    DB_CHARSET = "DB_CHARSET"
    DB_COLLATE = "DB_COLLATE"
    WP_DEBUG = "WP_DEBUG"
    WPLANG = "WPLANG"
    EXTRA_PHP = "extra-php"

    @property
    def token(self) -> str:
        """Return the identifier searched for on each line of the file."""

        return self.value


OPTION_NAMES: Final[tuple[str, ...]] = (
    "dbname",
    "dbuser",
    "dbpass",
    "dbhost",
    "dbprefix",
    "dbcharset",
    "dbcollate",
    "wpdebug",
    "locale",
    "extra-php",
)

EXTRA_PHP_OPTION: Final[str] = "extra-php"
PREFIX_OPTION: Final[str] = "dbprefix"
DEBUG_OPTION: Final[str] = "wpdebug"

CREDENTIAL_KEYS: Final[tuple[ConfigKey, ...]] = (
    ConfigKey.DB_HOST,
    ConfigKey.DB_USER,
    ConfigKey.DB_PASSWORD,
)

if len(OPTION_NAMES) != len(ConfigKey):  # pragma: no cover - import-time invariant
    raise RuntimeError("OPTION_NAMES and ConfigKey must declare the same number of entries.")


def option_key_map() -> dict[str, ConfigKey]:
    """Return the positional mapping from option names to configuration keys."""

    return dict(zip(OPTION_NAMES, ConfigKey, strict=True))


__all__: Final = [
    "CREDENTIAL_KEYS",
    "ConfigKey",
    "DEBUG_OPTION",
    "EXTRA_PHP_OPTION",
    "OPTION_NAMES",
    "PREFIX_OPTION",
    "option_key_map",
]
