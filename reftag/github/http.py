"""HTTP client abstraction for the GitHub API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from reftag.core.result import Err, Ok, Result
from reftag.github.timeouts import HTTP_TIMEOUT_SECONDS

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP requests."""

    def request_json(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and parse the JSON response.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            url: Absolute URL
            body: JSON-serializable request body, if any

        Returns:
            Ok with the decoded JSON (None for empty bodies), or Err with HttpError
        """
        ...


class RealHttpClient:
    """HTTP client using urllib, authenticated with a bearer token."""

    def __init__(
        self,
        token: str,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        user_agent: str = "reftag",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._token = token
        self._ssl_context = ssl.create_default_context()

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "User-Agent": self.user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def request_json(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        data = None if body is None else json.dumps(body).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers=self._headers(data is not None),
        )
        try:
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_message(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


def _error_message(error: urllib.error.HTTPError) -> str:
    # GitHub explains most rejections in the body ("Reference already exists").
    try:
        payload: object = json.loads(error.read().decode("utf-8"))
    except (OSError, ValueError):
        return str(error.reason)
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return str(error.reason)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://api.example.com/refs", [])
        result = client.request_json("GET", "https://api.example.com/refs")
        assert result == Ok([])
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object | HttpError] = {}
        self.calls: list[tuple[str, str, object | None]] = []

    def set_response(self, method: str, url: str, response: object | HttpError) -> None:
        self._responses[(method, url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append((method, url, body))

        key = (method, url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
