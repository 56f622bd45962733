"""Tests for tagger/scanner.py - lazy paged ref traversal."""

from __future__ import annotations

from reftag.core.result import Err, Ok
from reftag.github.http import HttpError
from reftag.github.store import MockRefStore
from reftag.output.console import MockConsole
from reftag.tagger.scanner import StoreRefScanner
from reftag.tagger.semver import SemVerParser


def _scanner(store: MockRefStore, console: MockConsole | None = None) -> StoreRefScanner:
    return StoreRefScanner(store, SemVerParser(), console or MockConsole())


def _paged_calls(store: MockRefStore) -> list[tuple[str, ...]]:
    return [c for c in store.calls if c[0] == "paged_refs"]


def test_yields_stable_versions_only() -> None:
    store = MockRefStore(
        refs={
            "refs/tags/v3.2.0": "c320",
            "refs/tags/v3.3.0-rc.1": "c33rc",
            "refs/tags/v3": "c320",
            "refs/tags/latest": "c320",
            "refs/tags/1.0.0+build": "cb",
            "refs/heads/v9.9.9": "branch",
        }
    )
    console = MockConsole()

    items = list(_scanner(store, console).scan("tags"))

    assert all(isinstance(i, Ok) for i in items)
    records = [i.value for i in items if isinstance(i, Ok)]
    assert [(r.name, r.commit_id, str(r.version)) for r in records] == [("tags/v3.2.0", "c320", "3.2.0")]
    assert "debug: ignoring latest" in console.messages
    assert "debug: checking v3.2.0" in console.messages


def test_branch_namespace() -> None:
    store = MockRefStore(refs={"refs/heads/v1.0.0": "h1", "refs/tags/v2.0.0": "t2"})
    records = [i.value for i in _scanner(store).scan("heads") if isinstance(i, Ok)]
    assert [r.name for r in records] == ["heads/v1.0.0"]


def test_walks_every_page_in_order() -> None:
    store = MockRefStore(refs={f"refs/tags/v1.{i}.0": f"c{i}" for i in range(5)}, page_size=2)

    records = [i.value for i in _scanner(store).scan("tags") if isinstance(i, Ok)]

    assert [str(r.version) for r in records] == ["1.4.0", "1.3.0", "1.2.0", "1.1.0", "1.0.0"]
    assert _paged_calls(store) == [
        ("paged_refs", "refs/tags/", ""),
        ("paged_refs", "refs/tags/", "2"),
        ("paged_refs", "refs/tags/", "4"),
    ]


def test_is_lazy() -> None:
    store = MockRefStore(refs={f"refs/tags/v1.{i}.0": f"c{i}" for i in range(5)}, page_size=2)

    scan = _scanner(store).scan("tags")
    assert _paged_calls(store) == []

    first = next(scan)
    assert isinstance(first, Ok)
    assert len(_paged_calls(store)) == 1

    # Stopping early never fetches the next page.
    scan.close()
    assert len(_paged_calls(store)) == 1


def test_each_scan_is_a_fresh_traversal() -> None:
    store = MockRefStore(refs={"refs/tags/v1.0.0": "c1"})
    scanner = _scanner(store)
    assert len(list(scanner.scan("tags"))) == 1
    assert len(list(scanner.scan("tags"))) == 1


def test_page_failure_is_final_item() -> None:
    error = HttpError(url="https://api.github.com/graphql", status=502, message="Bad Gateway")
    store = MockRefStore(refs={"refs/tags/v1.0.0": "c1"}, failures={"paged_refs": error})

    items = list(_scanner(store).scan("tags"))

    assert items == [Err(error)]


def test_empty_namespace() -> None:
    assert list(_scanner(MockRefStore()).scan("tags")) == []
