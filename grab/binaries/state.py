"""Installed-version tracking.

The installer records which version it wrote for each binary so that
``grab update`` can tell whether the file on disk matches the manifest.
State is a small JSON object keyed by binary name.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from grab.platform.files import atomic_write_text

__all__ = [
    "InstalledBinary",
    "get_installed_version",
    "load_state",
    "save_state",
    "set_installed_version",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InstalledBinary:
    """State of an installed binary.

    Attributes:
        version: Installed version string
        installed_at: ISO timestamp of installation
    """

    version: str
    installed_at: str

    @classmethod
    def now(cls, version: str) -> InstalledBinary:
        """Create state with current timestamp."""
        return cls(version=version, installed_at=datetime.now().isoformat())


def load_state(state_path: Path) -> dict[str, InstalledBinary]:
    """Load state from disk; a missing, unreadable or corrupt file reads as empty."""
    if not state_path.exists():
        return {}

    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
        return {name: _parse_entry(entry) for name, entry in data.items()}
    except (OSError, UnicodeDecodeError, ValueError, TypeError, KeyError, AttributeError):
        logger.warning("ignoring unreadable state file %s", state_path)
        return {}


def _parse_entry(entry: dict[str, object]) -> InstalledBinary:
    version = entry["version"]
    installed_at = entry["installed_at"]
    if not isinstance(version, str) or not isinstance(installed_at, str):
        raise TypeError("state entry fields must be strings")
    return InstalledBinary(version=version, installed_at=installed_at)


def save_state(state_path: Path, state: dict[str, InstalledBinary]) -> None:
    data = {name: asdict(entry) for name, entry in state.items()}
    atomic_write_text(state_path, json.dumps(data, indent=2, sort_keys=True))


def get_installed_version(state_path: Path, name: str) -> str | None:
    """Recorded version for a binary, or None if not tracked."""
    entry = load_state(state_path).get(name)
    return entry.version if entry else None


def set_installed_version(state_path: Path, name: str, version: str) -> None:
    state = load_state(state_path)
    state[name] = InstalledBinary.now(version)
    save_state(state_path, state)
