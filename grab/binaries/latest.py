"""Compare declared versions against the latest published releases."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grab.binaries.source import release_version
from grab.core.result import Err, Ok, Result
from grab.core.version import InvalidVersionError

if TYPE_CHECKING:
    from grab.core.manifest import Binary
    from grab.github.client import GitHubClient
    from grab.platform.detection import Host

__all__ = ["LatestCheckFailure", "LatestStatus", "check_latest"]


@dataclass(frozen=True, slots=True)
class LatestStatus:
    """Declared vs. latest published version of one binary."""

    name: str
    declared: str
    latest: str
    tag: str
    outdated: bool


@dataclass(frozen=True, slots=True)
class LatestCheckFailure:
    binary: str
    message: str
    network: bool = True

    def __str__(self) -> str:
        return f"latest release check failed for {self.binary}: {self.message}"


def check_latest(
    binaries: Iterable[Binary],
    client: GitHubClient,
    host: Host,
) -> Result[list[LatestStatus], LatestCheckFailure]:
    """Look up the latest release of every binary, stopping at the first failure."""
    statuses: list[LatestStatus] = []
    for binary in binaries:
        result = client.latest_release(binary.org, binary.repo).map_err(
            lambda e: LatestCheckFailure(binary.name, e.message)
        )
        if isinstance(result, Err):
            return result

        tag = result.value.tag_name
        latest = release_version(binary, host, tag)
        try:
            outdated = binary.should_replace(latest)
        except InvalidVersionError as e:
            return Err(LatestCheckFailure(binary.name, str(e), network=False))

        statuses.append(
            LatestStatus(
                name=binary.name,
                declared=binary.version,
                latest=latest,
                tag=tag,
                outdated=outdated,
            )
        )
    return Ok(statuses)
