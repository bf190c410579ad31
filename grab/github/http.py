"""Plain HTTP GET behind a protocol.

The installer and the GitHub client only ever issue whole-body GETs, so the
protocol has a single method. RealHttpClient talks to the network through
urllib; MockHttpClient serves canned bodies keyed by URL.

Responses are returned whatever their status code; only transport failures
(DNS, refused connection, timeout, TLS) are errors at this layer. Callers
decide what a non-2xx status means for them.
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from grab import __version__
from grab.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
]

logger = logging.getLogger(__name__)

# Headers that must not follow a redirect to another host
_UNREDIRECTED = frozenset({"authorization"})


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport-level failure.

    Attributes:
        url: The URL that failed
        message: Human-readable error message
    """

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A completed HTTP exchange.

    Attributes:
        url: Requested URL
        status: HTTP status code
        body: Full response body
    """

    url: str
    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> object:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid UTF-8 JSON.
        """
        return json.loads(self.body.decode("utf-8"))


@runtime_checkable
class HttpClient(Protocol):
    """Anything that can GET a URL and hand back the full body."""

    def get(
        self, url: str, *, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        """GET url and read the whole body.

        Args:
            url: URL to fetch
            headers: Extra request headers

        Returns:
            Ok with HttpResponse (any status), or Err with HttpError
        """
        ...


class RealHttpClient:
    """urllib-based client with system certificates and a bounded timeout.

    Authorization headers are attached unredirected, so a redirect to a
    storage host never sees the token.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = f"grab/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def get(
        self, url: str, *, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
        for name, value in (headers or {}).items():
            if name.lower() in _UNREDIRECTED:
                req.add_unredirected_header(name, value)
            else:
                req.add_header(name, value)

        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(HttpResponse(url=url, status=response.status, body=response.read()))
        except urllib.error.HTTPError as e:
            # Error statuses still carry a body the caller may need
            return Ok(HttpResponse(url=url, status=e.code, body=e.read()))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, message=str(e)))


class MockHttpClient:
    """Canned responses keyed by URL; unknown URLs answer 404.

    Usage:
        client = MockHttpClient()
        client.set_response("https://example.com/tool.gz", gzip.compress(b"bin"))
        client.set_json("https://api.github.com/repos/o/r/releases/latest", {"tag_name": "v1"})
        result = client.get("https://example.com/tool.gz")
    """

    def __init__(self) -> None:
        self._responses: dict[str, HttpResponse | HttpError] = {}
        self.calls: list[str] = []
        self.headers: list[dict[str, str]] = []

    def set_response(self, url: str, body: bytes | HttpError, status: int = 200) -> None:
        """Serve body (or fail with a transport error) for url."""
        if isinstance(body, HttpError):
            self._responses[url] = body
        else:
            self._responses[url] = HttpResponse(url=url, status=status, body=body)

    def set_json(self, url: str, payload: object, status: int = 200) -> None:
        """Serve payload encoded as JSON for url."""
        self.set_response(url, json.dumps(payload).encode("utf-8"), status=status)

    def get(
        self, url: str, *, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        self.calls.append(url)
        self.headers.append(dict(headers or {}))

        response = self._responses.get(url)
        if response is None:
            return Ok(HttpResponse(url=url, status=404, body=b"Not Found"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
