from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from reftag.core.result import Err, Ok, Result
from reftag.github.http import HttpError
from reftag.github.store import RefStore
from reftag.output.console import ConsoleProtocol
from reftag.tagger.model import Namespace, RefRecord
from reftag.tagger.semver import VersionParser

ScanItem = Result[RefRecord, HttpError]


class RefScanner(Protocol):
    def scan(self, namespace: Namespace) -> Iterator[ScanItem]:
        """Yield every stable versioned ref under ``namespace``.

        A page fetch failure is yielded as the final ``Err`` item.
        """
        ...


class StoreRefScanner:
    """Pages through the ref store one request at a time.

    Each call to ``scan`` is a fresh traversal. The next page is requested
    only once the consumer has pulled every record of the current one, so
    stopping early never costs an extra request.
    """

    def __init__(self, store: RefStore, parser: VersionParser, console: ConsoleProtocol) -> None:
        self._store = store
        self._parser = parser
        self._console = console

    def scan(self, namespace: Namespace) -> Iterator[ScanItem]:
        prefix = f"refs/{namespace}/"
        cursor: str | None = None

        while True:
            page = self._store.paged_refs(prefix, cursor)
            if isinstance(page, Err):
                yield page
                return

            for ref in page.value.refs:
                version = self._parser.parse(ref.name)
                if version is None or not version.is_stable:
                    self._console.debug(f"ignoring {ref.name}")
                    continue
                self._console.debug(f"checking {ref.name}")
                yield Ok(
                    RefRecord(
                        name=f"{namespace}/{ref.name}",
                        commit_id=ref.commit_id,
                        version=version,
                    )
                )

            if not page.value.has_next_page or page.value.end_cursor is None:
                return
            cursor = page.value.end_cursor
