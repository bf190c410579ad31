from __future__ import annotations

from grab.binaries.installer import BinaryInstaller
from grab.cli.commands._helpers import unwrap_or_exit
from grab.cli.context import build_context


def install() -> None:
    """Install every declared binary that is not already in ~/.local/bin."""
    ctx = build_context()
    manifest = ctx.load_manifest()
    installer = BinaryInstaller(
        ctx.http(),
        ctx.host,
        ctx.bin_dir,
        ctx.console,
        state_path=ctx.state_path,
    )
    report = unwrap_or_exit(installer.install(manifest.binaries), ctx)
    if not report.changed and manifest.binaries:
        ctx.console.info("nothing to install")
