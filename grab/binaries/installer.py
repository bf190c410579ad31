"""Binary installation pipeline.

For each declared binary, in manifest order:
1. skip it if the destination file already exists
2. render its download URL for this host
3. download the payload
4. pull the executable out of the payload
5. write it to the destination with executable permissions

The first failure stops the run; later binaries are not attempted.

``update`` is the version-driven variant: binaries already on disk are
re-installed when the version recorded at install time differs from the
manifest.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from grab.binaries.archive import extract_artifact
from grab.binaries.source import archive_entry_name, resolve_url
from grab.binaries.state import get_installed_version, set_installed_version
from grab.core.result import Err, Ok, Result
from grab.core.version import InvalidVersionError
from grab.output.console import Style
from grab.platform.files import EXECUTABLE_MODE, atomic_write_bytes

if TYPE_CHECKING:
    from grab.core.manifest import Binary
    from grab.github.http import HttpClient
    from grab.output.console import ConsoleProtocol
    from grab.platform.detection import Host

__all__ = ["BinaryInstaller", "InstallFailure", "InstallPhase", "InstallReport"]

logger = logging.getLogger(__name__)


class InstallPhase(Enum):
    """Step of the pipeline a failure happened in."""

    RESOLVE = auto()
    FETCH = auto()
    EXTRACT = auto()
    WRITE = auto()
    VERSION = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class InstallFailure:
    """Failure that ended an install run.

    Attributes:
        binary: Name of the binary being processed
        phase: Pipeline step that failed
        message: Underlying error message
    """

    binary: str
    phase: InstallPhase
    message: str

    def __str__(self) -> str:
        return f"{self.phase} failed for {self.binary}: {self.message}"


def _names() -> list[str]:
    return []


@dataclass
class InstallReport:
    """What a run did, by binary name."""

    installed: list[str] = field(default_factory=_names)
    updated: list[str] = field(default_factory=_names)
    skipped: list[str] = field(default_factory=_names)
    untracked: list[str] = field(default_factory=_names)

    @property
    def changed(self) -> bool:
        return bool(self.installed or self.updated)


class BinaryInstaller:
    """Installs declared binaries into a bin directory.

    Usage:
        installer = BinaryInstaller(RealHttpClient(), detect(), local_bin_dir(), console)
        match installer.install(manifest.binaries):
            case Ok(report):
                ...
            case Err(failure):
                console.error(str(failure))
    """

    def __init__(
        self,
        http: HttpClient,
        host: Host,
        bin_dir: Path,
        console: ConsoleProtocol,
        *,
        state_path: Path | None = None,
    ) -> None:
        """Initialize installer.

        Args:
            http: HTTP client used to download payloads
            host: Host the URLs are rendered for
            bin_dir: Destination directory (e.g. ~/.local/bin)
            console: Progress output
            state_path: Installed-version state file; None disables tracking
        """
        self._http = http
        self._host = host
        self._bin_dir = bin_dir
        self._console = console
        self._state_path = state_path

    @property
    def bin_dir(self) -> Path:
        return self._bin_dir

    def destination(self, binary: Binary) -> Path:
        return self._bin_dir / binary.name

    def install(self, binaries: Iterable[Binary]) -> Result[InstallReport, InstallFailure]:
        """Install every binary that is not on disk yet."""
        report = InstallReport()
        for binary in binaries:
            if self.destination(binary).exists():
                self._console.print(f"{binary.name} already installed", Style.DIM)
                report.skipped.append(binary.name)
                continue

            self._console.print(f"Installing {binary.name}...")
            result = self.install_one(binary)
            if isinstance(result, Err):
                return result
            self._console.success(f"{binary.name} has been installed")
            report.installed.append(binary.name)
        return Ok(report)

    def update(self, binaries: Iterable[Binary]) -> Result[InstallReport, InstallFailure]:
        """Install missing binaries and replace those whose recorded version differs."""
        report = InstallReport()
        for binary in binaries:
            if not self.destination(binary).exists():
                self._console.print(f"Installing {binary.name}...")
                result = self.install_one(binary)
                if isinstance(result, Err):
                    return result
                self._console.success(f"{binary.name} has been installed")
                report.installed.append(binary.name)
                continue

            current = self._recorded_version(binary)
            if current is None:
                self._console.warning(f"{binary.name} is installed but its version is not tracked")
                report.untracked.append(binary.name)
                continue

            try:
                replace = binary.should_replace(current)
            except InvalidVersionError as e:
                return Err(InstallFailure(binary.name, InstallPhase.VERSION, str(e)))

            if not replace:
                self._console.print(f"{binary.name} {current} is up to date", Style.DIM)
                report.skipped.append(binary.name)
                continue

            self._console.print(f"Updating {binary.name} {current} -> {binary.version}...")
            result = self.install_one(binary)
            if isinstance(result, Err):
                return result
            self._console.success(f"{binary.name} has been updated")
            report.updated.append(binary.name)
        return Ok(report)

    def install_one(self, binary: Binary) -> Result[Path, InstallFailure]:
        """Resolve, fetch, extract and write one binary, overwriting any existing file."""
        url_result = resolve_url(binary, self._host)
        if isinstance(url_result, Err):
            return Err(InstallFailure(binary.name, InstallPhase.RESOLVE, str(url_result.error)))
        url = url_result.value

        fetched = self._http.get(url)
        if isinstance(fetched, Err):
            return Err(InstallFailure(binary.name, InstallPhase.FETCH, str(fetched.error)))
        response = fetched.value
        if not response.ok:
            logger.warning("%s: %s answered HTTP %d", binary.name, url, response.status)

        extracted = extract_artifact(archive_entry_name(binary, self._host), response.body, url)
        if isinstance(extracted, Err):
            return Err(InstallFailure(binary.name, InstallPhase.EXTRACT, str(extracted.error)))

        dest = self.destination(binary)
        try:
            atomic_write_bytes(dest, extracted.value, mode=EXECUTABLE_MODE)
            if self._state_path is not None:
                set_installed_version(self._state_path, binary.name, binary.version)
        except OSError as e:
            message = f"error writing binary to disk: {e}"
            return Err(InstallFailure(binary.name, InstallPhase.WRITE, message))

        logger.debug("wrote %d bytes to %s", len(extracted.value), dest)
        return Ok(dest)

    def _recorded_version(self, binary: Binary) -> str | None:
        if self._state_path is None:
            return None
        return get_installed_version(self._state_path, binary.name)
