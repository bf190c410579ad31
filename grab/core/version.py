from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "InvalidVersionError",
    "SemVer",
    "compare_versions",
    "parse_version",
    "should_replace",
]


_SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


class InvalidVersionError(ValueError):
    """Raised when a version string is not semver-shaped."""

    def __init__(self, version: str) -> None:
        super().__init__(f"invalid semantic version: {version!r}")
        self.version = version


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{'.'.join(self.prerelease)}"
        return core

    def _key(self) -> tuple[int, int, int, int, tuple[tuple[int, int | str], ...]]:
        # A release sorts after any of its prereleases.
        if not self.prerelease:
            return (self.major, self.minor, self.patch, 1, ())
        ids: list[tuple[int, int | str]] = []
        for ident in self.prerelease:
            if ident.isdigit():
                ids.append((0, int(ident)))
            else:
                ids.append((1, ident))
        return (self.major, self.minor, self.patch, 0, tuple(ids))

    def __lt__(self, other: SemVer) -> bool:
        return self._key() < other._key()

    def __gt__(self, other: SemVer) -> bool:
        return self._key() > other._key()


def parse_version(version: str) -> SemVer:
    """Parse ``[v]MAJOR.MINOR.PATCH[-pre][+build]``.

    Build metadata is accepted but ignored for ordering.

    Raises:
        InvalidVersionError: If the string is not a semantic version.
    """
    m = _SEMVER_RE.match(version.strip())
    if m is None:
        raise InvalidVersionError(version)
    prerelease = tuple(m.group(4).split(".")) if m.group(4) else ()
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), prerelease)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as a sorts before, equal to, or after b."""
    va, vb = parse_version(a), parse_version(b)
    if va < vb:
        return -1
    if va > vb:
        return 1
    return 0


def should_replace(desired: str, current: str) -> bool:
    """True when current differs from desired in either direction."""
    desired_v = parse_version(desired)
    current_v = parse_version(current)
    return current_v < desired_v or current_v > desired_v
