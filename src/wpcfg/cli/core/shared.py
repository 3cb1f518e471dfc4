# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging adapters and debug wiring)."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

from rich.console import Console
from rich.text import Text

from ...logging import fail as core_fail
from ...logging import ok as core_ok

PACKAGE_LOGGER_NAME: Final[str] = "wpcfg"


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\[.*?\]|\S+)")

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        core_ok(message, use_emoji=self.use_emoji)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload; ``key=value`` pairs are highlighted.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            value_style = "bold blue" if key in {"command", "cmd", "path"} else "bold green"
            text.append(raw_value, style=value_style)
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(highlight=False)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


class _CLILogHandler(logging.Handler):
    """Forward package log records to :meth:`CLILogger.debug`."""

    def __init__(self, cli_logger: CLILogger) -> None:
        super().__init__(level=logging.DEBUG)
        self._cli_logger = cli_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._cli_logger.debug(f"{record.name}: {record.getMessage()}")
        except Exception:  # noqa: BLE001 - logging handlers must not raise
            self.handleError(record)


@contextmanager
def package_debug_logging(cli_logger: CLILogger) -> Iterator[None]:
    """Route ``wpcfg`` log records to ``cli_logger`` while debug output is on."""

    if not cli_logger.debug_enabled:
        yield
        return
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handler = _CLILogHandler(cli_logger)
    previous_level = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    try:
        yield
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)


__all__: Final = [
    "CLILogger",
    "PACKAGE_LOGGER_NAME",
    "build_cli_logger",
    "package_debug_logging",
]
