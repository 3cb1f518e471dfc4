# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Update CLI command package."""

from __future__ import annotations

import typer

from .command import UPDATE_HELP, update_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Attach the ``update`` command to ``app``.

    Args:
        app: Typer application receiving the command.
    """

    app.command(name="update", help=UPDATE_HELP)(update_command)
