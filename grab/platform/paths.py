"""User-level path locations.

- home(): the user's home directory
- local_bin_dir(): where binaries are installed (~/.local/bin)
- user_config_dir(): where the manifest lives (~/.config/grab)
- user_state_dir(): where installed-version state lives (~/.local/state/grab)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

__all__ = [
    "APP_NAME",
    "LOCAL_BIN_SUBPATH",
    "clear_caches",
    "default_manifest_path",
    "home",
    "local_bin_dir",
    "state_file_path",
    "user_config_dir",
    "user_state_dir",
]

APP_NAME = "grab"

# Destination of installed binaries, relative to the home directory
LOCAL_BIN_SUBPATH = Path(".local") / "bin"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    HOME wins when set (CI/container scenarios), then Path.home().
    """
    home_env = os.environ.get("HOME")
    if home_env:
        return Path(home_env)
    return Path.home()


def local_bin_dir(home_dir: Path | None = None) -> Path:
    """Directory binaries are installed into."""
    return (home_dir or home()) / LOCAL_BIN_SUBPATH


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user-level configuration directory.

    Location: $XDG_CONFIG_HOME/grab or ~/.config/grab
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


@lru_cache(maxsize=1)
def user_state_dir() -> Path:
    """Get the user-level state directory.

    Location: $XDG_STATE_HOME/grab or ~/.local/state/grab
    """
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state) / APP_NAME
    return home() / ".local" / "state" / APP_NAME


def default_manifest_path() -> Path:
    return user_config_dir() / "manifest.toml"


def state_file_path() -> Path:
    return user_state_dir() / "state.json"


def clear_caches() -> None:
    """Clear all cached paths.

    Useful for testing when environment variables change.
    """
    home.cache_clear()
    user_config_dir.cache_clear()
    user_state_dir.cache_clear()
