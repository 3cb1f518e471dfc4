# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the wp-config update workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Final


class WpConfigError(RuntimeError):
    """Base error for fatal wp-config update failures."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


class MissingConfigFileError(WpConfigError):
    """Raised when no ``wp-config.php`` can be located."""

    def __init__(self, filename: str = "wp-config.php") -> None:
        super().__init__(f"No '{filename}' file exists - please use `wp config create` instead.")
        self.filename = filename


class NoUpdatesSuppliedError(WpConfigError):
    """Raised when the caller supplied no option to update."""

    def __init__(self) -> None:
        super().__init__("No values to update supplied.")


class InvalidPrefixError(WpConfigError):
    """Raised when the table prefix contains characters outside ``[A-Za-z0-9_]``."""

    def __init__(self, prefix: str) -> None:
        super().__init__("--dbprefix can only contain numbers, letters, and underscores.")
        self.prefix = prefix


class InvalidOptionValueError(WpConfigError):
    """Raised when an option name is unknown or its value cannot be accepted."""


class ExtractionError(WpConfigError):
    """Raised when current values cannot be read from the configuration file."""


class ConnectivityCheckError(WpConfigError):
    """Raised when the database connectivity check fails."""


class SentinelNotFoundError(WpConfigError):
    """Raised when extra code cannot be spliced because the marker is missing."""

    def __init__(self, sentinel: str) -> None:
        super().__init__(f"Could not find the '{sentinel}' marker to insert extra PHP before.")
        self.sentinel = sentinel


class WriteFailureError(WpConfigError):
    """Raised when the patched document cannot be written back to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not update '{path.name}': {reason}")
        self.path = path


class SettingsError(WpConfigError):
    """Raised when the tool's own settings files are invalid."""


__all__: Final = [
    "ConnectivityCheckError",
    "ExtractionError",
    "InvalidOptionValueError",
    "InvalidPrefixError",
    "MissingConfigFileError",
    "NoUpdatesSuppliedError",
    "SentinelNotFoundError",
    "SettingsError",
    "WpConfigError",
    "WriteFailureError",
]
