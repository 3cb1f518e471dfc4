# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Update workflow tying normalisation, extraction, diffing and patching together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .connectivity import check_connectivity
from .diff import UpdatePlan, compute_changes
from .document import ConfigDocument
from .extractor import ValueExtractor, build_extractor
from .normalizer import RawOptions, normalize_updates, read_stdin_text
from .patcher import ConfigPatcher
from .process_utils import run_command
from .settings import UpdaterSettings

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[..., Any]


class UpdateStatus(Enum):
    NOOP = "noop"
    UPDATED = "updated"


@dataclass(slots=True)
class UpdateOutcome:
    """Result of one update invocation."""

    status: UpdateStatus
    path: Path
    plan: UpdatePlan
    content: str | None = None

    @property
    def changed_keys(self) -> list[str]:
        return [key.token for key in self.plan.changes]


@dataclass(slots=True)
class ConfigUpdater:
    """Apply option updates to a single configuration file.

    Every failure surfaces as a :class:`~wpcfg.errors.WpConfigError` raised
    before the file is touched; the file is written at most once.
    """

    settings: UpdaterSettings = field(default_factory=UpdaterSettings)
    extractor: ValueExtractor | None = None
    check_runner: CommandRunner = run_command
    read_stdin: Callable[[], str] = read_stdin_text
    _extractor: ValueExtractor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.extractor is not None:
            self._extractor = self.extractor
        else:
            self._extractor = build_extractor(
                self.settings.extractor,
                php_command=self.settings.php_command,
                timeout=self.settings.check_timeout,
            )

    @property
    def value_extractor(self) -> ValueExtractor:
        """Return the extractor reading current values, built from settings unless injected."""

        return self._extractor

    def plan(self, document: ConfigDocument, raw: RawOptions) -> UpdatePlan:
        """Return the changes ``raw`` would make to ``document``."""

        updates = normalize_updates(raw, read_stdin=self.read_stdin)
        current = self._extractor.extract(document.text, path=document.path)
        plan = compute_changes(updates, current)
        LOGGER.debug("requested=%s changed=%s", [key.token for key in updates], [key.token for key in plan.changes])
        return plan

    def run(self, config_path: Path, raw: RawOptions, *, skip_check: bool = False) -> UpdateOutcome:
        """Update ``config_path`` with ``raw`` options.

        Args:
            config_path: Location of the configuration file.
            raw: Option name to value, as supplied by the caller.
            skip_check: Skip the database connectivity check.

        Returns:
            UpdateOutcome: Whether anything was written and the applied plan.
        """

        document = ConfigDocument.read(config_path)
        plan = self.plan(document, raw)

        if not skip_check and plan.needs_connectivity_check:
            check_connectivity(
                plan.effective_credentials(),
                mysql_command=self.settings.mysql_command,
                timeout=self.settings.check_timeout,
                runner=self.check_runner,
            )

        if plan.is_noop:
            return UpdateOutcome(status=UpdateStatus.NOOP, path=config_path, plan=plan)

        patcher = ConfigPatcher(sentinel=self.settings.sentinel, line_separator=document.line_separator)
        content = patcher.patch(document.text, plan)
        document.write(content)
        return UpdateOutcome(status=UpdateStatus.UPDATED, path=config_path, plan=plan, content=content)


__all__ = ["ConfigUpdater", "UpdateOutcome", "UpdateStatus"]
