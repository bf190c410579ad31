"""GitHub access: HTTP transport and the releases client."""

from grab.github.client import GitHubClient, Release, ReleaseAsset, ReleaseError
from grab.github.http import (
    HttpClient,
    HttpError,
    HttpResponse,
    MockHttpClient,
    RealHttpClient,
)

__all__ = [
    "GitHubClient",
    "Release",
    "ReleaseAsset",
    "ReleaseError",
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
]
