"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["EXECUTABLE_MODE", "atomic_write_bytes", "atomic_write_text"]

EXECUTABLE_MODE = 0o755


def atomic_write_bytes(path: Path, content: bytes, *, mode: int | None = None) -> None:
    """Write bytes to path atomically using temp file + replace.

    The parent directory is created if missing. When mode is given it is
    applied to the temp file before it replaces the destination, so the
    final file never exists without its permission bits.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically."""
    atomic_write_bytes(path, content.encode(encoding))
