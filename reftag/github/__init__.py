"""GitHub adapters: HTTP transport and the refs store built on it."""

from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .store import GitHubRefStore, MatchingRef, MockRefStore, PagedRef, RefPage, RefStore

__all__ = [
    "GitHubRefStore",
    "HttpClient",
    "HttpError",
    "MatchingRef",
    "MockHttpClient",
    "MockRefStore",
    "PagedRef",
    "RealHttpClient",
    "RefPage",
    "RefStore",
]
