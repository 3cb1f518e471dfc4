# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command updating values in an existing ``wp-config.php``."""

from __future__ import annotations

import typer

from ....errors import WpConfigError
from ....locate import find_wordpress_root, locate_config
from ....settings import load_settings
from ....updater import ConfigUpdater, UpdateOutcome, UpdateStatus
from ...core.shared import CLILogger, build_cli_logger, package_debug_logging
from .models import (
    CONFIG_OPTION,
    DBCHARSET_OPTION,
    DBCOLLATE_OPTION,
    DBHOST_OPTION,
    DBNAME_OPTION,
    DBPASS_OPTION,
    DBPREFIX_OPTION,
    DBUSER_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    EXTRA_PHP_FLAG,
    LOCALE_OPTION,
    PATH_OPTION,
    SKIP_CHECK_FLAG,
    WPDEBUG_OPTION,
    UpdateOptions,
    build_update_options,
)

UPDATE_HELP = """Update a wp-config.php file.

Only values that differ from the current file are rewritten; everything
else in the file is left exactly as it was.
"""


def update_command(
    path: PATH_OPTION = None,
    config: CONFIG_OPTION = None,
    dbname: DBNAME_OPTION = None,
    dbuser: DBUSER_OPTION = None,
    dbpass: DBPASS_OPTION = None,
    dbhost: DBHOST_OPTION = None,
    dbprefix: DBPREFIX_OPTION = None,
    dbcharset: DBCHARSET_OPTION = None,
    dbcollate: DBCOLLATE_OPTION = None,
    wpdebug: WPDEBUG_OPTION = None,
    locale: LOCALE_OPTION = None,
    extra_php: EXTRA_PHP_FLAG = False,
    skip_check: SKIP_CHECK_FLAG = False,
    emoji: EMOJI_OPTION = None,
    debug: DEBUG_OPTION = False,
) -> None:
    """Update database constants and other values in wp-config.php.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    options = build_update_options(
        path=path,
        config=config,
        dbname=dbname,
        dbuser=dbuser,
        dbpass=dbpass,
        dbhost=dbhost,
        dbprefix=dbprefix,
        dbcharset=dbcharset,
        dbcollate=dbcollate,
        wpdebug=wpdebug,
        locale=locale,
        extra_php=extra_php,
        skip_check=skip_check,
        emoji=emoji,
        debug=debug,
    )
    logger = build_cli_logger(emoji=options.emoji if options.emoji is not None else True, debug=options.debug)
    with package_debug_logging(logger):
        try:
            outcome = _run_update(options, logger)
        except WpConfigError as exc:
            logger.fail(str(exc))
            raise typer.Exit(code=exc.exit_code) from exc

    _emit_update_summary(outcome, logger)
    raise typer.Exit(code=0)


def _run_update(options: UpdateOptions, logger: CLILogger) -> UpdateOutcome:
    """Locate the file, resolve settings and apply the requested changes.

    Args:
        options: Parsed CLI options controlling the update.
        logger: CLI logger; its emoji preference follows the loaded settings
            unless ``--emoji/--no-emoji`` was given.

    Returns:
        UpdateOutcome: Result reported by :class:`ConfigUpdater`.
    """

    root = find_wordpress_root(options.path)
    loaded = load_settings(wordpress_root=root, explicit=options.config)
    if options.emoji is None:
        logger.use_emoji = loaded.settings.emoji
    for source in loaded.sources:
        logger.debug(f"settings path={source}")

    config_path = locate_config(options.path, filename=loaded.settings.config_filename)
    logger.debug(f"config path={config_path}")

    updater = ConfigUpdater(settings=loaded.settings)
    return updater.run(config_path, options.raw_options(), skip_check=options.skip_check)


def _emit_update_summary(outcome: UpdateOutcome, logger: CLILogger) -> None:
    """Report the outcome of the update."""

    if outcome.status is UpdateStatus.NOOP:
        logger.ok("Nothing needs to be updated.")
        return
    for key in outcome.changed_keys:
        logger.debug(f"changed key={key}")
    logger.ok(f"Updated '{outcome.path.name}'.")


__all__ = ["UPDATE_HELP", "update_command"]
