from __future__ import annotations

from pathlib import Path

import typer

from grab.binaries.source import resolve_release_name
from grab.cli.commands._helpers import unwrap_or_exit
from grab.cli.context import build_context
from grab.core.errors import ErrorCode
from grab.core.result import Err
from grab.output.console import Style
from grab.platform.files import atomic_write_bytes


def fetch(
    name: str = typer.Argument(..., help="Binary name from the manifest."),
    asset: str = typer.Argument(..., help="Asset file name attached to the release."),
    output: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        help="Directory to save the asset into.",
    ),
) -> None:
    """Download one asset from the declared release of a binary."""
    ctx = build_context()
    manifest = ctx.load_manifest()

    binary = manifest.get(name)
    if binary is None:
        ctx.console.error(f"unknown binary: {name}")
        if manifest.names:
            ctx.console.print(f"Available: {', '.join(manifest.names)}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    tag = resolve_release_name(binary, ctx.host)
    if isinstance(tag, Err):
        ctx.console.error(f"release name of {name}: {tag.error}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    data = unwrap_or_exit(
        ctx.github().download_release_asset(binary.org, binary.repo, tag.value, asset),
        ctx,
    )

    dest = output / asset
    try:
        atomic_write_bytes(dest, data)
    except OSError as e:
        ctx.console.error(f"error writing {dest}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    ctx.console.success(f"{asset} ({len(data)} bytes) saved to {dest}")
