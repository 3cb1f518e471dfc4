# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Database connectivity pre-check using the ``mysql`` command-line client."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, Final

from .diff import DatabaseCredentials
from .errors import ConnectivityCheckError
from .process_utils import SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)

DEFAULT_MYSQL_COMMAND: Final[tuple[str, ...]] = ("mysql", "--no-defaults")
PASSWORD_ENV_VAR: Final[str] = "MYSQL_PWD"

CommandRunner = Callable[..., Any]


def build_check_command(base: Sequence[str], credentials: DatabaseCredentials) -> list[str]:
    """Return the argument list running an empty statement against the server."""

    args = [*base, "--execute=;"]
    if credentials.host:
        args.append(f"--host={credentials.host}")
    if credentials.user:
        args.append(f"--user={credentials.user}")
    return args


def check_connectivity(
    credentials: DatabaseCredentials,
    *,
    mysql_command: Sequence[str] = DEFAULT_MYSQL_COMMAND,
    timeout: float | None = None,
    runner: CommandRunner = run_command,
) -> None:
    """Verify the server accepts ``credentials``.

    The password travels through ``MYSQL_PWD`` rather than the argument list.

    Raises:
        ConnectivityCheckError: If the client is missing, times out or exits non-zero.
    """

    args = build_check_command(mysql_command, credentials)
    env = {PASSWORD_ENV_VAR: credentials.password}
    LOGGER.debug("checking database connectivity host=%s user=%s", credentials.host, credentials.user)
    try:
        runner(args, env_overrides=env, check=True, capture_output=True, timeout=timeout)
    except FileNotFoundError as exc:
        raise ConnectivityCheckError(f"Database client unavailable: {exc}") from exc
    except SubprocessExecutionError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise ConnectivityCheckError(f"Database connection failed: {detail}") from exc


__all__ = ["DEFAULT_MYSQL_COMMAND", "PASSWORD_ENV_VAR", "build_check_command", "check_connectivity"]
