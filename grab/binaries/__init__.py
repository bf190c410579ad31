"""Binary resolution and installation.

- source.py: download URL and release name templates
- archive.py: payload classification and extraction
- installer.py: install/update pipeline
- latest.py: declared vs. latest release comparison
- state.py: installed-version tracking
"""

from grab.binaries.archive import ArchiveError, PayloadKind, extract_artifact
from grab.binaries.installer import BinaryInstaller, InstallFailure, InstallPhase, InstallReport
from grab.binaries.source import resolve_release_name, resolve_url

__all__ = [
    "ArchiveError",
    "PayloadKind",
    "extract_artifact",
    "BinaryInstaller",
    "InstallFailure",
    "InstallPhase",
    "InstallReport",
    "resolve_release_name",
    "resolve_url",
]
