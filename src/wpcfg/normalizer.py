# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Turn raw option input into configuration-key updates."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Mapping
from typing import Final, TypeAlias

from .errors import InvalidOptionValueError, InvalidPrefixError, NoUpdatesSuppliedError
from .keys import DEBUG_OPTION, EXTRA_PHP_OPTION, OPTION_NAMES, PREFIX_OPTION, ConfigKey, option_key_map

OptionValue: TypeAlias = str | bool
RawOptions: TypeAlias = Mapping[str, OptionValue]
UpdateInput: TypeAlias = dict[ConfigKey, OptionValue]

PREFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_]")
_TRUTHY: Final[frozenset[str]] = frozenset({"true", "1", "yes", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"false", "0", "no", "off"})


def read_stdin_text() -> str:
    """Return everything available on standard input."""

    return sys.stdin.read()


def validate_prefix(prefix: str) -> str:
    """Return ``prefix`` when it only holds letters, digits and underscores.

    Raises:
        InvalidPrefixError: If any other character is present.
    """

    if PREFIX_PATTERN.search(prefix):
        raise InvalidPrefixError(prefix)
    return prefix


def coerce_debug_flag(value: OptionValue) -> bool:
    """Interpret a ``wpdebug`` option value as a boolean.

    Raises:
        InvalidOptionValueError: If the text is not a recognised boolean spelling.
    """

    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise InvalidOptionValueError(f"--{DEBUG_OPTION} must be true or false, got '{value}'.")


def normalize_updates(
    raw: RawOptions,
    *,
    read_stdin: Callable[[], str] = read_stdin_text,
) -> UpdateInput:
    """Map supplied options onto configuration keys.

    ``extra-php`` set to exactly ``True`` is replaced with everything read
    from ``read_stdin``. Options are merged over an all-empty template in
    declared order, renamed positionally, and empty strings are dropped while
    ``False`` is kept so flags can be switched off.

    Args:
        raw: Option name to value, as supplied by the caller.
        read_stdin: Callable returning the full standard input text.

    Returns:
        UpdateInput: Configuration keys mapped to requested values.

    Raises:
        NoUpdatesSuppliedError: If ``raw`` is empty.
        InvalidOptionValueError: If an option name is unknown or a value is invalid.
        InvalidPrefixError: If ``dbprefix`` contains disallowed characters.
    """

    if not raw:
        raise NoUpdatesSuppliedError()
    unknown = sorted(set(raw) - set(OPTION_NAMES))
    if unknown:
        raise InvalidOptionValueError(f"Unknown option(s): {', '.join(unknown)}.")

    options: dict[str, OptionValue] = dict(raw)
    if options.get(EXTRA_PHP_OPTION) is True:
        options[EXTRA_PHP_OPTION] = read_stdin()

    prefix = options.get(PREFIX_OPTION)
    if isinstance(prefix, str) and prefix:
        validate_prefix(prefix)

    debug = options.get(DEBUG_OPTION)
    if debug is not None and debug != "":
        options[DEBUG_OPTION] = coerce_debug_flag(debug)

    merged: dict[str, OptionValue] = dict.fromkeys(OPTION_NAMES, "")
    merged.update(options)

    mapping = option_key_map()
    return {mapping[name]: value for name, value in merged.items() if value != ""}


__all__ = [
    "OptionValue",
    "PREFIX_PATTERN",
    "RawOptions",
    "UpdateInput",
    "coerce_debug_flag",
    "normalize_updates",
    "read_stdin_text",
    "validate_prefix",
]
