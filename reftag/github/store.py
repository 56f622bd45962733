"""Ref store: the GitHub refs namespace of one repository.

``RefStore`` is the contract the tagger layer depends on. ``GitHubRefStore``
implements it over the REST git refs endpoints and the GraphQL refs
connection; ``MockRefStore`` keeps refs in memory for tests.

Full ref paths always start with ``refs/`` (``refs/tags/v3``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote

from reftag.core.result import Err, Ok, Result
from reftag.core.structured import as_obj_list, as_str_dict, get_list, get_str, get_table
from reftag.github.http import HttpClient, HttpError
from reftag.github.timeouts import REFS_PAGE_SIZE

__all__ = [
    "GitHubRefStore",
    "MatchingRef",
    "MockRefStore",
    "PagedRef",
    "RefPage",
    "RefStore",
]


@dataclass(frozen=True, slots=True)
class MatchingRef:
    ref: str  # full path, e.g. refs/tags/v3
    object_sha: str


@dataclass(frozen=True, slots=True)
class PagedRef:
    name: str  # relative to the queried prefix, e.g. v3.2.0
    commit_id: str


@dataclass(frozen=True, slots=True)
class RefPage:
    refs: tuple[PagedRef, ...]
    end_cursor: str | None
    has_next_page: bool


class RefStore(Protocol):
    def list_matching_refs(self, ref_prefix: str) -> Result[list[MatchingRef], HttpError]:
        """List refs whose path starts with ``refs/<ref_prefix>``."""
        ...

    def create_ref(self, full_ref: str, sha: str) -> Result[None, HttpError]:
        """Create a ref; fails if it already exists."""
        ...

    def update_ref(self, full_ref: str, sha: str, force: bool = True) -> Result[None, HttpError]:
        """Move an existing ref; fails if it does not exist."""
        ...

    def delete_ref(self, full_ref: str) -> Result[None, HttpError]: ...

    def paged_refs(self, ref_prefix: str, cursor: str | None) -> Result[RefPage, HttpError]:
        """Fetch one page of refs under ``ref_prefix``, alphabetically descending."""
        ...

    def peel_commit(self, sha: str) -> Result[str, HttpError]:
        """Resolve an annotated tag object to its commit; other objects resolve to themselves."""
        ...


REFS_QUERY = """
query ($repoOwner: String!, $repoName: String!, $refPrefix: String!, $pageSize: Int!, $cursor: String) {
  repository(name: $repoName, owner: $repoOwner) {
    refs(refPrefix: $refPrefix, first: $pageSize, after: $cursor, orderBy: {field: ALPHABETICAL, direction: DESC}) {
      nodes {
        name
        target {
          oid
          ... on Tag {
            target {
              oid
            }
          }
        }
      }
      pageInfo {
        endCursor
        hasNextPage
      }
    }
  }
}
"""


def _short(full_ref: str) -> str:
    return full_ref.removeprefix("refs/")


class GitHubRefStore:
    """Ref store backed by the GitHub API.

    Example:
        http = RealHttpClient(token)
        store = GitHubRefStore(http, repository="octo/repo")
        page = store.paged_refs("refs/tags/", None)
    """

    def __init__(
        self,
        http: HttpClient,
        *,
        repository: str,
        api_url: str = "https://api.github.com",
        graphql_url: str | None = None,
        page_size: int = REFS_PAGE_SIZE,
    ) -> None:
        self._http = http
        self._owner, _, self._name = repository.partition("/")
        self._repo_url = f"{api_url.rstrip('/')}/repos/{repository}"
        self._graphql_url = graphql_url or f"{api_url.rstrip('/')}/graphql"
        self._page_size = page_size

    def _ref_url(self, full_ref: str) -> str:
        return f"{self._repo_url}/git/refs/{quote(_short(full_ref), safe='/')}"

    def list_matching_refs(self, ref_prefix: str) -> Result[list[MatchingRef], HttpError]:
        url = f"{self._repo_url}/git/matching-refs/{quote(ref_prefix, safe='/')}"
        result = self._http.request_json("GET", url)
        if isinstance(result, Err):
            return result

        raw = as_obj_list(result.value)
        if raw is None:
            return Err(HttpError(url=url, status=0, message="unexpected matching-refs payload"))

        out: list[MatchingRef] = []
        for item in raw:
            d = as_str_dict(item)
            if d is None:
                continue
            ref = get_str(d, "ref")
            obj = get_table(d, "object")
            sha = get_str(obj, "sha") if obj is not None else None
            if ref is None or sha is None:
                continue
            out.append(MatchingRef(ref=ref, object_sha=sha))
        return Ok(out)

    def create_ref(self, full_ref: str, sha: str) -> Result[None, HttpError]:
        result = self._http.request_json(
            "POST", f"{self._repo_url}/git/refs", {"ref": full_ref, "sha": sha}
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    def update_ref(self, full_ref: str, sha: str, force: bool = True) -> Result[None, HttpError]:
        result = self._http.request_json(
            "PATCH", self._ref_url(full_ref), {"sha": sha, "force": force}
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    def delete_ref(self, full_ref: str) -> Result[None, HttpError]:
        result = self._http.request_json("DELETE", self._ref_url(full_ref))
        if isinstance(result, Err):
            return result
        return Ok(None)

    def paged_refs(self, ref_prefix: str, cursor: str | None) -> Result[RefPage, HttpError]:
        url = self._graphql_url
        result = self._http.request_json(
            "POST",
            url,
            {
                "query": REFS_QUERY,
                "variables": {
                    "repoOwner": self._owner,
                    "repoName": self._name,
                    "refPrefix": ref_prefix,
                    "pageSize": self._page_size,
                    "cursor": cursor,
                },
            },
        )
        if isinstance(result, Err):
            return result

        payload = as_str_dict(result.value)
        if payload is None:
            return Err(HttpError(url=url, status=0, message="unexpected GraphQL payload"))

        errors = get_list(payload, "errors")
        if errors:
            messages = [
                get_str(d, "message") or "unknown error"
                for d in (as_str_dict(e) for e in errors)
                if d is not None
            ]
            return Err(HttpError(url=url, status=0, message="; ".join(messages) or "GraphQL error"))

        data = get_table(payload, "data")
        repository = get_table(data, "repository") if data is not None else None
        refs = get_table(repository, "refs") if repository is not None else None
        if refs is None:
            return Err(HttpError(url=url, status=0, message="missing repository.refs"))

        page: list[PagedRef] = []
        for node in get_list(refs, "nodes") or []:
            d = as_str_dict(node)
            if d is None:
                continue
            name = get_str(d, "name")
            commit_id = _peeled_oid(get_table(d, "target"))
            if name is None or commit_id is None:
                continue
            page.append(PagedRef(name=name, commit_id=commit_id))

        info = get_table(refs, "pageInfo") or {}
        return Ok(
            RefPage(
                refs=tuple(page),
                end_cursor=get_str(info, "endCursor"),
                has_next_page=info.get("hasNextPage") is True,
            )
        )

    def peel_commit(self, sha: str) -> Result[str, HttpError]:
        url = f"{self._repo_url}/git/tags/{quote(sha, safe='')}"
        result = self._http.request_json("GET", url)
        if isinstance(result, Err):
            # Not a tag object: a lightweight tag already names its commit.
            if result.error.status in (404, 422):
                return Ok(sha)
            return result

        payload = as_str_dict(result.value)
        obj = get_table(payload, "object") if payload is not None else None
        target = get_str(obj, "sha") if obj is not None else None
        if target is None:
            return Err(HttpError(url=url, status=0, message="unexpected git tag payload"))
        return Ok(target)


def _peeled_oid(target: dict[str, object] | None) -> str | None:
    # Annotated tags point at a tag object; report the commit behind it.
    if target is None:
        return None
    inner = get_table(target, "target")
    if inner is not None:
        oid = get_str(inner, "oid")
        if oid is not None:
            return oid
    return get_str(target, "oid")


def _empty_refs() -> dict[str, str]:
    return {}


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_failures() -> dict[str, HttpError]:
    return {}


@dataclass
class MockRefStore:
    """In-memory ref store for tests.

    ``refs`` maps full ref paths to commit ids. ``tag_objects`` maps annotated
    tag object ids to the commit they point at. ``failures`` maps an operation
    name (``create_ref``, ``paged_refs``...) to the error it should return.

    Usage:
        store = MockRefStore(refs={"refs/tags/v3.2.0": "abc"})
        store.create_ref("refs/tags/v3", "abc")
        assert store.refs["refs/tags/v3"] == "abc"
    """

    refs: dict[str, str] = field(default_factory=_empty_refs)
    tag_objects: dict[str, str] = field(default_factory=_empty_refs)
    page_size: int = REFS_PAGE_SIZE
    failures: dict[str, HttpError] = field(default_factory=_empty_failures)
    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)

    def _fail(self, op: str) -> Err[HttpError] | None:
        error = self.failures.get(op)
        if error is None:
            return None
        return Err(error)

    def list_matching_refs(self, ref_prefix: str) -> Result[list[MatchingRef], HttpError]:
        self.calls.append(("list_matching_refs", ref_prefix))
        if (failed := self._fail("list_matching_refs")) is not None:
            return failed
        full_prefix = f"refs/{ref_prefix}"
        return Ok(
            [
                MatchingRef(ref=ref, object_sha=sha)
                for ref, sha in sorted(self.refs.items())
                if ref.startswith(full_prefix)
            ]
        )

    def create_ref(self, full_ref: str, sha: str) -> Result[None, HttpError]:
        self.calls.append(("create_ref", full_ref, sha))
        if (failed := self._fail("create_ref")) is not None:
            return failed
        if full_ref in self.refs:
            return Err(HttpError(url=full_ref, status=422, message="Reference already exists"))
        self.refs[full_ref] = sha
        return Ok(None)

    def update_ref(self, full_ref: str, sha: str, force: bool = True) -> Result[None, HttpError]:
        self.calls.append(("update_ref", full_ref, sha))
        if (failed := self._fail("update_ref")) is not None:
            return failed
        if full_ref not in self.refs:
            return Err(HttpError(url=full_ref, status=422, message="Reference does not exist"))
        self.refs[full_ref] = sha
        return Ok(None)

    def delete_ref(self, full_ref: str) -> Result[None, HttpError]:
        self.calls.append(("delete_ref", full_ref))
        if (failed := self._fail("delete_ref")) is not None:
            return failed
        if full_ref not in self.refs:
            return Err(HttpError(url=full_ref, status=422, message="Reference does not exist"))
        del self.refs[full_ref]
        return Ok(None)

    def paged_refs(self, ref_prefix: str, cursor: str | None) -> Result[RefPage, HttpError]:
        self.calls.append(("paged_refs", ref_prefix, cursor or ""))
        if (failed := self._fail("paged_refs")) is not None:
            return failed
        names = sorted(
            (
                (ref.removeprefix(ref_prefix), sha)
                for ref, sha in self.refs.items()
                if ref.startswith(ref_prefix)
            ),
            reverse=True,
        )
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        chunk = names[start:end]
        has_next = end < len(names)
        return Ok(
            RefPage(
                refs=tuple(PagedRef(name=n, commit_id=sha) for n, sha in chunk),
                end_cursor=str(end) if has_next else None,
                has_next_page=has_next,
            )
        )

    def peel_commit(self, sha: str) -> Result[str, HttpError]:
        self.calls.append(("peel_commit", sha))
        if (failed := self._fail("peel_commit")) is not None:
            return failed
        return Ok(self.tag_objects.get(sha, sha))
