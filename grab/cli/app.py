from __future__ import annotations

import os
from pathlib import Path

import typer

from grab import __version__
from grab.cli.commands.fetch import fetch
from grab.cli.commands.install import install
from grab.cli.commands.latest import latest
from grab.cli.commands.update import update
from grab.core.errors import ErrorCode
from grab.core.result import Err
from grab.core.settings import normalize_log_level


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="User centric dotfile dependency manager.",
)


app.command()(install)
app.command()(update)
app.command()(latest)
app.command()(fetch)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    manifest: Path | None = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Manifest file (GRAB_MANIFEST, default ~/.config/grab/manifest.toml).",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level: debug, info, warn, error (GRAB_LOG_LEVEL).",
    ),
) -> None:
    if log_level is not None:
        if isinstance(normalize_log_level(log_level), Err):
            typer.echo(f"error: invalid log level {log_level!r}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ["GRAB_LOG_LEVEL"] = log_level

    if manifest is not None:
        os.environ["GRAB_MANIFEST"] = str(manifest.expanduser())


def main() -> None:
    app()
