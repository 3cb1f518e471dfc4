# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read and atomically rewrite the configuration file."""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import ExtractionError, WriteFailureError


def detect_line_separator(text: str) -> str:
    """Return the terminator used by ``text``, falling back to the platform's."""

    if "\r\n" in text:
        return "\r\n"
    if "\n" in text:
        return "\n"
    return os.linesep


@dataclass(frozen=True, slots=True)
class ConfigDocument:
    """Snapshot of the configuration file taken once per invocation."""

    path: Path
    text: str
    line_separator: str

    @classmethod
    def read(cls, path: Path) -> ConfigDocument:
        """Load ``path`` without newline translation so terminators round-trip."""

        try:
            with path.open(encoding="utf-8", newline="") as handle:
                text = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ExtractionError(f"Could not read '{path}': {exc}") from exc
        return cls(path=path, text=text, line_separator=detect_line_separator(text))

    def write(self, content: str) -> None:
        """Replace the file with ``content`` through a temporary sibling file.

        The original permission bits are kept. Empty content is refused so a
        failed patch can never truncate the file.

        Raises:
            WriteFailureError: If the content is empty or the filesystem rejects the write.
        """

        if not content:
            raise WriteFailureError(self.path, "refusing to write empty content")
        directory = self.path.parent
        try:
            mode = stat.S_IMODE(self.path.stat().st_mode)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        except OSError as exc:
            raise WriteFailureError(self.path, str(exc)) from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise WriteFailureError(self.path, str(exc)) from exc


__all__ = ["ConfigDocument", "detect_line_separator"]
