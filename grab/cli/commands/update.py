from __future__ import annotations

from grab.binaries.installer import BinaryInstaller
from grab.cli.commands._helpers import unwrap_or_exit
from grab.cli.context import build_context
from grab.output.console import Style


def update() -> None:
    """Re-install binaries whose installed version differs from the manifest."""
    ctx = build_context()
    manifest = ctx.load_manifest()
    installer = BinaryInstaller(
        ctx.http(),
        ctx.host,
        ctx.bin_dir,
        ctx.console,
        state_path=ctx.state_path,
    )
    report = unwrap_or_exit(installer.update(manifest.binaries), ctx)
    if report.untracked:
        ctx.console.print(
            f"hint: remove {', '.join(report.untracked)} from {ctx.bin_dir} and run "
            "`grab install` to track them",
            Style.DIM,
        )
    if not report.changed:
        ctx.console.info("everything is up to date")
