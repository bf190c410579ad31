from __future__ import annotations

import typer

from grab.binaries.latest import check_latest
from grab.cli.commands._helpers import unwrap_or_exit
from grab.cli.context import build_context
from grab.core.errors import ErrorCode


def latest(
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit non-zero when a declared version is not the latest release.",
    ),
) -> None:
    """Compare declared versions with the latest GitHub releases."""
    ctx = build_context()
    manifest = ctx.load_manifest()
    statuses = unwrap_or_exit(check_latest(manifest.binaries, ctx.github(), ctx.host), ctx)

    ctx.console.table(
        ("binary", "declared", "latest", "status"),
        [
            (s.name, s.declared, s.latest, "differs" if s.outdated else "current")
            for s in statuses
        ],
    )
    if strict and any(s.outdated for s in statuses):
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
