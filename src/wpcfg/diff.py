# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compare requested updates with the values currently in the file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from .extractor import CurrentValue, CurrentValues
from .keys import CREDENTIAL_KEYS, ConfigKey
from .normalizer import OptionValue, UpdateInput

_MISSING: Final = object()


@dataclass(frozen=True, slots=True)
class DatabaseCredentials:
    """Host, user and password a connectivity check should use."""

    host: str
    user: str
    password: str


@dataclass(frozen=True, slots=True)
class UpdatePlan:
    """Changed entries together with the values they replace."""

    changes: Mapping[ConfigKey, OptionValue] = field(default_factory=dict)
    current: Mapping[str, CurrentValue] = field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return not self.changes

    @property
    def needs_connectivity_check(self) -> bool:
        """Return ``True`` when host, user or password changes to a non-empty value."""

        return any(self.changes.get(key) for key in CREDENTIAL_KEYS)

    def old_value(self, key: ConfigKey) -> CurrentValue | None:
        return self.current.get(key.token)

    def effective_credentials(self) -> DatabaseCredentials:
        """Return credentials preferring changed values over current ones."""

        def pick(key: ConfigKey) -> str:
            value = self.changes.get(key) or self.current.get(key.token) or ""
            return str(value)

        return DatabaseCredentials(
            host=pick(ConfigKey.DB_HOST),
            user=pick(ConfigKey.DB_USER),
            password=pick(ConfigKey.DB_PASSWORD),
        )


def compute_changes(updates: UpdateInput, current: CurrentValues) -> UpdatePlan:
    """Return the subset of ``updates`` that differs from ``current``.

    A key missing from ``current`` counts as different. Extra PHP is never
    defined in the file, so it is kept whenever it is non-empty. Keys absent
    from ``updates`` never appear in the result.
    """

    changes: dict[ConfigKey, OptionValue] = {}
    for key, value in updates.items():
        if key is ConfigKey.EXTRA_PHP:
            if value:
                changes[key] = value
            continue
        if current.get(key.token, _MISSING) != value:
            changes[key] = value
    return UpdatePlan(changes=changes, current=dict(current))


__all__ = ["DatabaseCredentials", "UpdatePlan", "compute_changes"]
