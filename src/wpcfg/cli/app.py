# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .commands import register_commands

app = typer.Typer(help="Update values in an existing wp-config.php.", no_args_is_help=True)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"wpcfg {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_print_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Update values in an existing wp-config.php."""


register_commands(app)

__all__ = ["app", "main"]
