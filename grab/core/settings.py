"""Environment-driven settings.

Settings are read once from an explicit environment mapping so that nothing
below the CLI layer touches ``os.environ``:

- GH_TOKEN / GITHUB_TOKEN: optional GitHub API credential
- GRAB_MANIFEST: manifest path (default ~/.config/grab/manifest.toml)
- GRAB_LOG_LEVEL: debug, info, warning (warn), error
- GRAB_HTTP_TIMEOUT: request timeout in seconds (default 30)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from grab.platform.paths import default_manifest_path

from .result import Err, Ok, Result

__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVELS",
    "Settings",
    "SettingsError",
    "load_settings",
    "normalize_log_level",
]

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "warning"

LOG_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
}


@dataclass(frozen=True, slots=True)
class SettingsError:
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved process settings.

    Attributes:
        manifest_path: Where the manifest is read from
        log_level: Logging level name understood by the logging module
        http_timeout: Timeout applied to every outbound request
        github_token: Optional bearer credential for the GitHub API
    """

    manifest_path: Path
    log_level: str = "WARNING"
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    github_token: str | None = None


def normalize_log_level(value: str) -> Result[str, SettingsError]:
    """Map a user-supplied level name to a logging level name."""
    level = LOG_LEVELS.get(value.strip().lower())
    if level is None:
        return Err(SettingsError(f"invalid log level {value!r}"))
    return Ok(level)


def load_settings(
    environ: Mapping[str, str],
    *,
    manifest: Path | None = None,
    log_level: str | None = None,
) -> Result[Settings, SettingsError]:
    """Build Settings from an environment mapping.

    Explicit arguments (from command-line options) win over the environment.
    """
    manifest_path = manifest
    if manifest_path is None:
        env_manifest = environ.get("GRAB_MANIFEST", "").strip()
        manifest_path = Path(env_manifest) if env_manifest else default_manifest_path()

    level_result = normalize_log_level(
        log_level or environ.get("GRAB_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    )
    if isinstance(level_result, Err):
        return level_result

    timeout = DEFAULT_HTTP_TIMEOUT
    raw_timeout = environ.get("GRAB_HTTP_TIMEOUT", "").strip()
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            return Err(SettingsError(f"invalid GRAB_HTTP_TIMEOUT {raw_timeout!r}"))
        if timeout <= 0:
            return Err(SettingsError("GRAB_HTTP_TIMEOUT must be positive"))

    token = (environ.get("GH_TOKEN") or environ.get("GITHUB_TOKEN") or "").strip() or None

    return Ok(
        Settings(
            manifest_path=manifest_path.expanduser(),
            log_level=level_result.value,
            http_timeout=timeout,
            github_token=token,
        )
    )
