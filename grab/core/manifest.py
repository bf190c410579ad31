"""Typed manifest loading.

The manifest is a TOML file with one ``[[binary]]`` table per executable:

    [[binary]]
    name = "jq"
    org = "jqlang"
    repo = "jq"
    version = "1.7.1"
    release_name = "jq-{{ .Version }}"
    source = "https://github.com/jqlang/jq/releases/download/jq-{{ .Version }}/jq-{{ .Platform }}-{{ .Arch }}"

    [binary.platforms.darwin]
    arm64 = ["macos", "arm64"]

    [binary.file_name]
    "linux,amd64" = "jq"

Declarations are immutable once loaded.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_table
from .version import should_replace

__all__ = [
    "DEFAULT_RELEASE_NAME",
    "Binary",
    "Manifest",
    "ManifestError",
    "PlatformOverrides",
    "load_manifest",
    "parse_manifest",
]

DEFAULT_RELEASE_NAME = "{{ .Version }}"

# os -> arch -> (platform alias, arch alias)
PlatformOverrides = Mapping[str, Mapping[str, tuple[str, str]]]

_REQUIRED_FIELDS = ("name", "org", "repo", "version", "source")


@dataclass(frozen=True, slots=True)
class ManifestError:
    """Error when the manifest cannot be loaded or is invalid."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


def _no_platforms() -> dict[str, dict[str, tuple[str, str]]]:
    return {}


def _no_file_names() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Binary:
    """One declared binary.

    Attributes:
        name: Executable name, also the installed file name
        org: GitHub organisation or user
        repo: GitHub repository
        version: Desired version
        source: Download URL template
        release_name: Release tag template
        file_name: "os,arch" -> file name to pick out of a tar archive
        platforms: os -> arch -> (platform alias, arch alias) used in templates
    """

    name: str
    org: str
    repo: str
    version: str
    source: str
    release_name: str = DEFAULT_RELEASE_NAME
    file_name: Mapping[str, str] = field(default_factory=_no_file_names)
    platforms: PlatformOverrides = field(default_factory=_no_platforms)

    def should_replace(self, current_version: str) -> bool:
        """True when current_version differs from the desired version.

        Raises:
            InvalidVersionError: If either version is not semver-shaped.
        """
        return should_replace(self.version, current_version)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[Binary, str]:
        """Build a Binary from one parsed ``[[binary]]`` table."""
        values: dict[str, str] = {}
        for key in _REQUIRED_FIELDS:
            value = get_str(data, key)
            if value is None:
                return Err(f"missing or empty field '{key}'")
            values[key] = value

        release_name = data.get("release_name", DEFAULT_RELEASE_NAME)
        if not isinstance(release_name, str) or not release_name.strip():
            return Err("'release_name' must be a non-empty string")

        file_name: dict[str, str] = {}
        for key, value in (get_table(data, "file_name") or {}).items():
            if not isinstance(value, str):
                return Err(f"file_name[{key!r}] must be a string")
            file_name[key] = value

        platforms = _parse_platforms(get_table(data, "platforms") or {})
        if isinstance(platforms, Err):
            return platforms

        return Ok(
            cls(
                name=values["name"],
                org=values["org"],
                repo=values["repo"],
                version=values["version"],
                source=values["source"],
                release_name=release_name,
                file_name=file_name,
                platforms=platforms.value,
            )
        )


def _parse_platforms(
    table: StrDict,
) -> Result[dict[str, dict[str, tuple[str, str]]], str]:
    out: dict[str, dict[str, tuple[str, str]]] = {}
    for os_name, arches_obj in table.items():
        arches = as_str_dict(arches_obj)
        if arches is None:
            return Err(f"platforms.{os_name} must be a table")
        out[os_name] = {}
        for arch, pair in arches.items():
            if (
                not isinstance(pair, list)
                or len(pair) != 2
                or not all(isinstance(p, str) for p in pair)
            ):
                return Err(f"platforms.{os_name}.{arch} must be a [platform, arch] pair")
            out[os_name][arch] = (pair[0], pair[1])
    return Ok(out)


@dataclass(frozen=True, slots=True)
class Manifest:
    """All declared binaries, in manifest order."""

    binaries: tuple[Binary, ...] = ()

    def get(self, name: str) -> Binary | None:
        for binary in self.binaries:
            if binary.name == name:
                return binary
        return None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(binary.name for binary in self.binaries)


def parse_manifest(
    data: Mapping[str, object], path: Path | None = None
) -> Result[Manifest, ManifestError]:
    """Build a Manifest from a parsed TOML mapping."""
    if "binary" not in data:
        return Ok(Manifest())

    entries = get_list(data, "binary")
    if entries is None:
        return Err(ManifestError("'binary' must be an array of tables", path=path))

    binaries: list[Binary] = []
    seen: set[str] = set()
    for index, entry_obj in enumerate(entries):
        entry = as_str_dict(entry_obj)
        if entry is None:
            return Err(ManifestError(f"binary[{index}] must be a table", path=path))

        result = Binary.from_dict(entry)
        if isinstance(result, Err):
            return Err(ManifestError(f"binary[{index}]: {result.error}", path=path))

        binary = result.value
        if binary.name in seen:
            return Err(ManifestError(f"duplicate binary name: {binary.name}", path=path))
        seen.add(binary.name)
        binaries.append(binary)

    return Ok(Manifest(binaries=tuple(binaries)))


def _parse_toml(path: Path) -> Result[StrDict, ManifestError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ManifestError("Manifest root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ManifestError("Manifest file not found", path=path))
    except PermissionError:
        return Err(ManifestError("Permission denied reading manifest", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ManifestError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ManifestError(f"Error reading manifest: {e}", path=path))


def load_manifest(path: Path) -> Result[Manifest, ManifestError]:
    """Load and validate the manifest from a TOML file.

    Args:
        path: Path to manifest.toml

    Returns:
        Ok(Manifest) on success, Err(ManifestError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return parse_manifest(result.value, path=path)
