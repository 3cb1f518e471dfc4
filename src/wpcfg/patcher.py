# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Best-effort textual patching of ``wp-config.php``.

This is deliberately not a PHP-aware rewrite. A line changes only when it
contains a changed key's token *and* the exact text of that key's old value;
anything else (different quoting, a key whose old value was falsy, a key
never defined) is left untouched without complaint.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from .diff import UpdatePlan
from .errors import SentinelNotFoundError
from .extractor import CurrentValue
from .keys import ConfigKey

DEFAULT_SENTINEL: Final[str] = "/* That's all, stop editing!"


def render_literal(value: CurrentValue) -> str:
    """Return the text used to find or write ``value`` inside a line."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(slots=True)
class ConfigPatcher:
    """Rewrite changed values in place and splice extra PHP before the sentinel."""

    sentinel: str = DEFAULT_SENTINEL
    line_separator: str = os.linesep

    def patch(self, content: str, plan: UpdatePlan) -> str:
        """Return ``content`` with ``plan`` applied.

        Args:
            content: Full text of the configuration file.
            plan: Changed entries and the values they replace.

        Returns:
            str: The complete new document.

        Raises:
            SentinelNotFoundError: If extra PHP is requested but the marker is missing.
        """

        lines = self.substitute_lines(content.split(self.line_separator), plan)
        patched = self.line_separator.join(lines)
        extra = plan.changes.get(ConfigKey.EXTRA_PHP)
        if isinstance(extra, str) and extra:
            patched = self.splice_extra(patched, extra)
        return patched

    def substitute_lines(self, lines: Sequence[str], plan: UpdatePlan) -> list[str]:
        """Replace old literals with new ones on lines naming a changed key."""

        replacements: list[tuple[str, str, str]] = []
        for key, value in plan.changes.items():
            if key is ConfigKey.EXTRA_PHP:
                continue
            old = plan.old_value(key)
            if old is None:
                continue
            replacements.append((key.token, render_literal(old), render_literal(value)))

        patched: list[str] = []
        for line in lines:
            for token, old_text, new_text in replacements:
                if token in line:
                    line = line.replace(old_text, new_text, 1)
            patched.append(line)
        return patched

    def splice_extra(self, content: str, extra: str) -> str:
        """Insert trimmed ``extra`` code, padded by blank lines, before the sentinel."""

        before, found, after = content.partition(self.sentinel)
        if not found:
            raise SentinelNotFoundError(self.sentinel)
        padding = self.line_separator * 2
        return f"{before}{padding}{extra.strip()}{padding}{self.sentinel}{after}"


__all__ = ["ConfigPatcher", "DEFAULT_SENTINEL", "render_literal"]
