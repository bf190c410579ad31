"""GitHub Releases client.

- latest_release(): query the release index for a repository's latest release
- download_release_asset(): fetch the bytes of an asset attached to a release

GitHub reports failures as a JSON body with a ``message`` field
(e.g. "Not Found", "API rate limit exceeded for ..."). That text is what
users need to see, so it is surfaced verbatim instead of the bare status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grab.core.result import Err, Ok, Result
from grab.core.structured import as_obj_list, as_str_dict, get_int, get_str

if TYPE_CHECKING:
    from grab.github.http import HttpClient, HttpResponse

__all__ = [
    "API_BASE",
    "DOWNLOAD_BASE",
    "GitHubClient",
    "Release",
    "ReleaseAsset",
    "ReleaseError",
    "asset_download_url",
    "latest_release_url",
]

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
DOWNLOAD_BASE = "https://github.com"
API_VERSION = "2022-11-28"


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Failure talking to GitHub.

    Attributes:
        url: Request URL
        message: Upstream message or transport error text
        status: HTTP status (0 when no response was received)
    """

    url: str
    message: str
    status: int = 0

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} (HTTP {self.status}, {self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    name: str
    download_url: str
    size: int = 0


@dataclass(frozen=True, slots=True)
class Release:
    """A published release.

    Attributes:
        tag_name: Git tag of the release (e.g. "v1.2.3")
        name: Display name (may be empty)
        assets: Downloadable files attached to the release
    """

    tag_name: str
    name: str = ""
    assets: tuple[ReleaseAsset, ...] = ()

    @property
    def asset_names(self) -> tuple[str, ...]:
        return tuple(asset.name for asset in self.assets)

    @classmethod
    def from_json(cls, data: object) -> Release | None:
        """Parse a release object from the GitHub API, or None if malformed."""
        table = as_str_dict(data)
        if table is None:
            return None
        tag_name = get_str(table, "tag_name")
        if tag_name is None:
            return None

        assets: list[ReleaseAsset] = []
        for item in as_obj_list(table.get("assets")) or []:
            asset = as_str_dict(item)
            if asset is None:
                continue
            name = get_str(asset, "name")
            if name is None:
                continue
            assets.append(
                ReleaseAsset(
                    name=name,
                    download_url=get_str(asset, "browser_download_url") or "",
                    size=get_int(asset, "size") or 0,
                )
            )

        return cls(tag_name=tag_name, name=get_str(table, "name") or "", assets=tuple(assets))


def latest_release_url(org: str, repo: str) -> str:
    return f"{API_BASE}/repos/{org}/{repo}/releases/latest"


def asset_download_url(org: str, repo: str, tag: str, asset: str) -> str:
    return f"{DOWNLOAD_BASE}/{org}/{repo}/releases/download/{tag}/{asset}"


def _error_from_response(response: HttpResponse) -> ReleaseError:
    """Turn a non-2xx API response into a ReleaseError carrying GitHub's message."""
    try:
        payload = as_str_dict(response.json())
    except ValueError:
        payload = None
    if payload is None:
        return ReleaseError(
            url=response.url,
            status=response.status,
            message="error parsing error response as JSON",
        )
    message = payload.get("message")
    if not isinstance(message, str):
        return ReleaseError(
            url=response.url,
            status=response.status,
            message="error response has no message",
        )
    return ReleaseError(url=response.url, status=response.status, message=message)


class GitHubClient:
    """Client for the GitHub release index and release downloads.

    Usage:
        client = GitHubClient(RealHttpClient(), token=settings.github_token)
        match client.latest_release("jqlang", "jq"):
            case Ok(release):
                print(release.tag_name)
            case Err(error):
                print(error.message)
    """

    def __init__(self, http: HttpClient, token: str | None = None) -> None:
        """Initialize client.

        Args:
            http: HTTP client used for every request
            token: Optional bearer token sent to the API (not to downloads)
        """
        self._http = http
        self._token = token

    def _api_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def latest_release(self, org: str, repo: str) -> Result[Release, ReleaseError]:
        """Fetch the most recent published release of org/repo."""
        url = latest_release_url(org, repo)
        result = self._http.get(url, headers=self._api_headers())
        if isinstance(result, Err):
            message = f"error executing request: {result.error.message}"
            return Err(ReleaseError(url=url, message=message))

        response = result.value
        if not response.ok:
            error = _error_from_response(response)
            logger.debug("release lookup for %s/%s failed: %s", org, repo, error)
            return Err(error)

        try:
            data = response.json()
        except ValueError as e:
            message = f"error parsing response as JSON: {e}"
            return Err(ReleaseError(url=url, status=response.status, message=message))

        release = Release.from_json(data)
        if release is None:
            message = "Missing tag_name in response"
            return Err(ReleaseError(url=url, status=response.status, message=message))
        return Ok(release)

    def download_release_asset(
        self, org: str, repo: str, tag: str, asset: str
    ) -> Result[bytes, ReleaseError]:
        """Download the named asset of the release tagged ``tag``."""
        url = asset_download_url(org, repo, tag, asset)
        logger.debug("Downloading asset from GitHub: %s", url)

        result = self._http.get(url)
        if isinstance(result, Err):
            message = f"error requesting asset: {result.error.message}"
            return Err(ReleaseError(url=url, message=message))

        response = result.value
        if not response.ok:
            message = "asset download failed"
            return Err(ReleaseError(url=url, status=response.status, message=message))
        return Ok(response.body)
