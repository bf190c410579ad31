"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from grab.core.result import Err, Result
from grab.output.errors import GrabError, error_exit_code, print_error

if TYPE_CHECKING:
    from grab.cli.context import CLIContext


def unwrap_or_exit[T](result: Result[T, GrabError], ctx: CLIContext) -> T:
    """Return the value of an Ok, or print the error and exit.

    Replaces the common pattern:
        match result:
            case Err(e):
                print_error(e, ctx.console)
                raise typer.Exit(code=error_exit_code(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))
    return result.value
