"""Host operating system and architecture detection.

Release assets are almost always named with Go-style identifiers
(``linux``/``darwin``/``windows`` and ``amd64``/``arm64``), so the host is
reported in that vocabulary. Manifests remap these per binary through their
``platforms`` table when an upstream project uses different names.

Detection is done lazily and cached. Code that needs the host receives a
``Host`` value explicitly so it can be tested with any OS/arch pair.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "Host",
    "detect",
    "detect_arch",
    "detect_os",
]

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


@dataclass(frozen=True, slots=True)
class Host:
    """Operating system and architecture of the machine binaries are installed on.

    Attributes:
        os: OS identifier (e.g. "linux", "darwin", "windows")
        arch: Architecture identifier (e.g. "amd64", "arm64")
    """

    os: str
    arch: str

    @property
    def key(self) -> str:
        """Lookup key used by manifest ``file_name`` tables ("linux,amd64")."""
        return f"{self.os},{self.arch}"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@lru_cache(maxsize=1)
def detect_os() -> str:
    """Detect the current operating system (cached)."""
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return "linux"
    if system.startswith("darwin"):
        return "darwin"
    if system.startswith(("win32", "cygwin", "msys")):
        return "windows"
    if system.startswith("freebsd"):
        return "freebsd"
    return system


@lru_cache(maxsize=1)
def detect_arch() -> str:
    """Detect the current CPU architecture (cached)."""
    # NOTE: platform.machine() may query WMI on Windows (slow/hangs on some machines).
    if detect_os() == "windows":
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        ).lower()
    else:
        machine = _platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


@lru_cache(maxsize=1)
def detect() -> Host:
    """Detect the running host (cached)."""
    return Host(os=detect_os(), arch=detect_arch())
