# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tool settings with layered TOML sources."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, PositiveFloat, ValidationError, field_validator

from .connectivity import DEFAULT_MYSQL_COMMAND
from .errors import SettingsError
from .locate import DEFAULT_CONFIG_FILENAME
from .patcher import DEFAULT_SENTINEL

SETTINGS_ENV_VAR: Final[str] = "WPCFG_CONFIG"
PROJECT_SETTINGS_FILENAME: Final[str] = "wpcfg.toml"
USER_SETTINGS_PATH: Final[Path] = Path("~/.config/wpcfg/config.toml")


class UpdaterSettings(BaseModel):
    """Settings controlling how the updater finds, reads and checks the file."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    config_filename: str = DEFAULT_CONFIG_FILENAME
    sentinel: str = DEFAULT_SENTINEL
    extractor: Literal["static", "php"] = "static"
    php_command: tuple[str, ...] = ("php",)
    mysql_command: tuple[str, ...] = DEFAULT_MYSQL_COMMAND
    check_timeout: PositiveFloat | None = 30.0
    emoji: bool = True

    @field_validator("php_command", "mysql_command", mode="before")
    @classmethod
    def _coerce_command(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split()
        if isinstance(value, (list, tuple)) and value and all(isinstance(entry, str) for entry in value):
            return tuple(value)
        raise ValueError("commands must be a non-empty string or array of strings")

    @field_validator("sentinel", "config_filename")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


@dataclass(slots=True)
class SettingsLoadResult:
    """Resolved settings plus the files that contributed to them."""

    settings: UpdaterSettings
    sources: list[Path] = field(default_factory=list)


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"Invalid settings file {path}: {exc}") from exc
    except OSError as exc:
        raise SettingsError(f"Could not read settings file {path}: {exc}") from exc
    return data


def settings_candidates(wordpress_root: Path | None, explicit: Path | None) -> list[Path]:
    """Return settings files in precedence order, lowest first."""

    candidates = [USER_SETTINGS_PATH.expanduser()]
    if wordpress_root is not None:
        candidates.append(wordpress_root / PROJECT_SETTINGS_FILENAME)
    if explicit is not None:
        candidates.append(explicit)
    return candidates


def load_settings(
    *,
    wordpress_root: Path | None = None,
    explicit: Path | None = None,
    candidates: Iterable[Path] | None = None,
) -> SettingsLoadResult:
    """Merge defaults with every existing settings file, later files winning.

    An explicitly requested file must exist; implicit ones are optional.

    Raises:
        SettingsError: If a file is unreadable, malformed or holds invalid values.
    """

    if explicit is not None and not explicit.is_file():
        raise SettingsError(f"Settings file {explicit} does not exist")
    paths = list(candidates) if candidates is not None else settings_candidates(wordpress_root, explicit)
    merged: dict[str, Any] = {}
    used: list[Path] = []
    for path in paths:
        if not path.is_file():
            continue
        merged.update(_load_toml(path))
        used.append(path)
    try:
        settings = UpdaterSettings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings: {exc}") from exc
    return SettingsLoadResult(settings=settings, sources=used)


__all__ = [
    "PROJECT_SETTINGS_FILENAME",
    "SETTINGS_ENV_VAR",
    "SettingsLoadResult",
    "USER_SETTINGS_PATH",
    "UpdaterSettings",
    "load_settings",
    "settings_candidates",
]
