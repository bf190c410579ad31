"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grab.binaries.installer import InstallFailure, InstallPhase
from grab.binaries.latest import LatestCheckFailure
from grab.core.errors import ErrorCode
from grab.core.manifest import ManifestError
from grab.core.settings import SettingsError
from grab.github.client import ReleaseError
from grab.output.console import Style

if TYPE_CHECKING:
    from grab.output.console import ConsoleProtocol

__all__ = ["GrabError", "error_exit_code", "print_error"]

GrabError = InstallFailure | LatestCheckFailure | ManifestError | ReleaseError | SettingsError

_PHASE_CODES = {
    InstallPhase.RESOLVE: ErrorCode.USER_ERROR,
    InstallPhase.VERSION: ErrorCode.USER_ERROR,
    InstallPhase.FETCH: ErrorCode.NETWORK_ERROR,
    InstallPhase.EXTRACT: ErrorCode.ARCHIVE_ERROR,
    InstallPhase.WRITE: ErrorCode.IO_ERROR,
}


def print_error(error: GrabError, console: ConsoleProtocol) -> None:
    """Print an error to the console with appropriate formatting."""
    match error:
        case InstallFailure(binary=binary, phase=phase, message=message):
            console.error(f"{phase} failed for {binary}: {message}")
            if phase == InstallPhase.WRITE:
                console.print("hint: check that the destination directory is writable", Style.DIM)
        case LatestCheckFailure(binary=binary, message=message):
            console.error(f"could not check latest release of {binary}: {message}")
            if "rate limit" in message.lower():
                console.print("hint: set GH_TOKEN to raise the GitHub API rate limit", Style.DIM)
        case ManifestError(message=message, path=path):
            console.error(f"invalid manifest: {message}")
            if path is not None:
                console.print(f"manifest: {path}", Style.DIM)
        case ReleaseError():
            console.error(str(error))
        case SettingsError(message=message):
            console.error(message)


def error_exit_code(error: GrabError) -> int:
    """Get exit code for an error."""
    match error:
        case InstallFailure(phase=phase):
            return int(_PHASE_CODES[phase])
        case LatestCheckFailure(network=network):
            return int(ErrorCode.NETWORK_ERROR if network else ErrorCode.USER_ERROR)
        case ManifestError():
            return int(ErrorCode.USER_ERROR)
        case ReleaseError():
            return int(ErrorCode.NETWORK_ERROR)
        case SettingsError():
            return int(ErrorCode.ENV_ERROR)
    return int(ErrorCode.USER_ERROR)
