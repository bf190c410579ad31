from __future__ import annotations

import os
import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from grab.platform.files import EXECUTABLE_MODE, atomic_write_bytes, atomic_write_text


class TestAtomicWrite:
    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        dest = tmp_path / "a" / "b" / "file.txt"
        atomic_write_text(dest, "hello")
        assert dest.read_text(encoding="utf-8") == "hello"

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        dest = tmp_path / "file.bin"
        dest.write_bytes(b"old")
        atomic_write_bytes(dest, b"new")
        assert dest.read_bytes() == b"new"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    def test_applies_mode(self, tmp_path: Path) -> None:
        dest = tmp_path / "tool"
        atomic_write_bytes(dest, b"\x7fELF", mode=EXECUTABLE_MODE)
        assert stat.S_IMODE(dest.stat().st_mode) == EXECUTABLE_MODE

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        atomic_write_bytes(tmp_path / "tool", b"data")
        assert [p.name for p in tmp_path.iterdir()] == ["tool"]

    def test_failed_replace_cleans_up(self, tmp_path: Path) -> None:
        dest = tmp_path / "tool"
        with (
            patch("grab.platform.files.os.replace", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            atomic_write_bytes(dest, b"data")

        assert not dest.exists()
        assert os.listdir(tmp_path) == []
