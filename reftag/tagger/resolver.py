"""Latest-version resolution over a ref scan.

e.g. if the event is a push of v3.2.2 and the repository already holds
v3.3.0 and v4.0.0, the result is repo_latest=4.0.0, major_latest=3.3.0. The
event then lags behind its own major line and must not move ``v3``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from reftag.core.result import Err, Ok, Result
from reftag.github.http import HttpError
from reftag.tagger.model import LatestState, RefRecord
from reftag.tagger.scanner import ScanItem


class LatestResolver(Protocol):
    def resolve(
        self,
        event: RefRecord,
        *,
        is_deletion: bool,
        scanned: Iterable[ScanItem],
    ) -> Result[LatestState, HttpError]: ...


class LinearLatestResolver:
    """Single pass over the scan; no sorting."""

    def resolve(
        self,
        event: RefRecord,
        *,
        is_deletion: bool,
        scanned: Iterable[ScanItem],
    ) -> Result[LatestState, HttpError]:
        # A deleted ref no longer exists and must not count as present.
        seed = None if is_deletion else event
        repo_latest: RefRecord | None = seed
        major_latest: RefRecord | None = seed
        major = event.version.major

        for item in scanned:
            if isinstance(item, Err):
                return item
            record = item.value

            if record.version.major == major and (
                major_latest is None or record.version > major_latest.version
            ):
                major_latest = record

            if repo_latest is None or record.version > repo_latest.version:
                repo_latest = record

        return Ok(LatestState(repo_latest=repo_latest, major_latest=major_latest))
