"""Tests for tagger/resolver.py - latest-version resolution."""

from __future__ import annotations

from reftag.core.result import Err, Ok
from reftag.github.http import HttpError
from reftag.tagger.model import RefRecord
from reftag.tagger.resolver import LinearLatestResolver
from reftag.tagger.scanner import ScanItem
from reftag.tagger.semver import parse_version


def _rec(raw: str, commit: str | None = None) -> RefRecord:
    version = parse_version(raw)
    assert version is not None
    return RefRecord(name=f"tags/{raw}", commit_id=commit or f"c-{raw}", version=version)


def _scan(*records: RefRecord) -> list[ScanItem]:
    return [Ok(r) for r in records]


def test_event_lags_behind_its_major_line() -> None:
    event = _rec("v3.2.2")

    result = LinearLatestResolver().resolve(
        event, is_deletion=False, scanned=_scan(_rec("v3.3.0"), _rec("v4.0.0"))
    )

    assert isinstance(result, Ok)
    assert result.value.repo_latest == _rec("v4.0.0")
    assert result.value.major_latest == _rec("v3.3.0")
    assert not result.value.major_is_repo_latest


def test_event_is_latest_everywhere() -> None:
    event = _rec("v3.2.0")

    result = LinearLatestResolver().resolve(
        event, is_deletion=False, scanned=_scan(_rec("v3.2.0"), _rec("v3.1.0"), _rec("v2.9.0"))
    )

    assert isinstance(result, Ok)
    assert result.value.repo_latest == event
    assert result.value.major_latest == event
    assert result.value.major_is_repo_latest


def test_equal_version_keeps_the_event_commit() -> None:
    event = _rec("v3.2.0", "event-commit")

    result = LinearLatestResolver().resolve(
        event, is_deletion=False, scanned=_scan(_rec("3.2.0", "other-commit"))
    )

    assert isinstance(result, Ok)
    assert result.value.major_latest is not None
    assert result.value.major_latest.commit_id == "event-commit"


def test_deleted_ref_does_not_count() -> None:
    event = _rec("v3.2.0")

    result = LinearLatestResolver().resolve(
        event, is_deletion=True, scanned=_scan(_rec("v3.1.0"), _rec("v2.0.0"))
    )

    assert isinstance(result, Ok)
    assert result.value.major_latest == _rec("v3.1.0")
    assert result.value.repo_latest == _rec("v3.1.0")


def test_deleting_the_last_ref_of_a_major_line() -> None:
    result = LinearLatestResolver().resolve(
        _rec("v3.0.0"), is_deletion=True, scanned=_scan(_rec("v2.0.0"))
    )

    assert isinstance(result, Ok)
    assert result.value.major_latest is None
    assert result.value.repo_latest == _rec("v2.0.0")
    assert not result.value.major_is_repo_latest


def test_resolution_is_idempotent() -> None:
    event = _rec("v1.5.0")
    scanned = _scan(_rec("v1.4.0"), _rec("v1.6.0"), _rec("v0.9.0"))
    resolver = LinearLatestResolver()

    first = resolver.resolve(event, is_deletion=False, scanned=scanned)
    second = resolver.resolve(event, is_deletion=False, scanned=scanned)

    assert first == second


def test_transport_failure_stops_resolution() -> None:
    error = HttpError(url="graphql", status=0, message="timeout")
    consumed: list[str] = []

    def scanned():  # type: ignore[no-untyped-def]
        consumed.append("first")
        yield Ok(_rec("v1.0.0"))
        yield Err(error)
        consumed.append("after-error")
        yield Ok(_rec("v9.0.0"))

    result = LinearLatestResolver().resolve(_rec("v1.1.0"), is_deletion=False, scanned=scanned())

    assert result == Err(error)
    assert consumed == ["first"]
