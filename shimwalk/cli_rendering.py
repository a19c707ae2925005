"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
classification rows and resolved path listings.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ShimwalkError


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ShimwalkError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_classification(path: str, flags: dict[str, bool]) -> None:
    """Print one `name: true|false` row per classification flag."""

    typer.echo(f"Path: {path}")
    for name in sorted(flags):
        typer.echo(f"{name}: {'true' if flags[name] else 'false'}")


def echo_paths(paths: str | list[str]) -> None:
    """Print one resolved path per line."""

    if isinstance(paths, str):
        typer.echo(paths)
        return
    for path in paths:
        typer.echo(path)
