# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data structures for the ``update`` CLI command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

import typer

from ....keys import EXTRA_PHP_OPTION
from ....normalizer import OptionValue
from ....settings import SETTINGS_ENV_VAR

PATH_OPTION = Annotated[
    Path | None,
    typer.Option("--path", help="Path to the WordPress files. Defaults to the current directory.", show_default=False),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--config",
        envvar=SETTINGS_ENV_VAR,
        help="Settings file layered over the user and project wpcfg.toml files.",
        show_default=False,
    ),
]
DBNAME_OPTION = Annotated[str | None, typer.Option("--dbname", help="Set the database name.")]
DBUSER_OPTION = Annotated[str | None, typer.Option("--dbuser", help="Set the database user.")]
DBPASS_OPTION = Annotated[str | None, typer.Option("--dbpass", help="Set the database user password.")]
DBHOST_OPTION = Annotated[str | None, typer.Option("--dbhost", help="Set the database host.")]
DBPREFIX_OPTION = Annotated[str | None, typer.Option("--dbprefix", help="Set the database table prefix.")]
DBCHARSET_OPTION = Annotated[str | None, typer.Option("--dbcharset", help="Set the database charset.")]
DBCOLLATE_OPTION = Annotated[str | None, typer.Option("--dbcollate", help="Set the database collation.")]
WPDEBUG_OPTION = Annotated[str | None, typer.Option("--wpdebug", help="Set WP_DEBUG to true / false.")]
LOCALE_OPTION = Annotated[str | None, typer.Option("--locale", help="Set the WPLANG constant.")]
EXTRA_PHP_FLAG = Annotated[
    bool,
    typer.Option("--extra-php", help="Copy additional PHP code into wp-config.php from STDIN."),
]
SKIP_CHECK_FLAG = Annotated[
    bool,
    typer.Option("--skip-check", help="Do not check the database connection."),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output.", show_default=False),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show diagnostic output."),
]


@dataclass(slots=True)
class UpdateOptions:
    """Normalised CLI inputs for the update workflow."""

    path: Path
    config: Path | None
    values: dict[str, str] = field(default_factory=dict)
    extra_php: bool = False
    skip_check: bool = False
    emoji: bool | None = None
    debug: bool = False

    def raw_options(self) -> dict[str, OptionValue]:
        """Return only the options the user actually supplied."""

        raw: dict[str, OptionValue] = dict(self.values)
        if self.extra_php:
            raw[EXTRA_PHP_OPTION] = True
        return raw


def build_update_options(
    *,
    path: Path | None,
    config: Path | None,
    dbname: str | None,
    dbuser: str | None,
    dbpass: str | None,
    dbhost: str | None,
    dbprefix: str | None,
    dbcharset: str | None,
    dbcollate: str | None,
    wpdebug: str | None,
    locale: str | None,
    extra_php: bool,
    skip_check: bool,
    emoji: bool | None,
    debug: bool,
) -> UpdateOptions:
    """Construct ``UpdateOptions`` from Typer parameters.

    Options left unset are omitted so an empty invocation is detectable.
    """

    supplied = {
        "dbname": dbname,
        "dbuser": dbuser,
        "dbpass": dbpass,
        "dbhost": dbhost,
        "dbprefix": dbprefix,
        "dbcharset": dbcharset,
        "dbcollate": dbcollate,
        "wpdebug": wpdebug,
        "locale": locale,
    }
    return UpdateOptions(
        path=(path or Path.cwd()).resolve(),
        config=config,
        values={name: value for name, value in supplied.items() if value is not None},
        extra_php=extra_php,
        skip_check=skip_check,
        emoji=emoji,
        debug=debug,
    )


__all__ = [
    "CONFIG_OPTION",
    "DBCHARSET_OPTION",
    "DBCOLLATE_OPTION",
    "DBHOST_OPTION",
    "DBNAME_OPTION",
    "DBPASS_OPTION",
    "DBPREFIX_OPTION",
    "DBUSER_OPTION",
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "EXTRA_PHP_FLAG",
    "LOCALE_OPTION",
    "PATH_OPTION",
    "SKIP_CHECK_FLAG",
    "UpdateOptions",
    "WPDEBUG_OPTION",
    "build_update_options",
]
