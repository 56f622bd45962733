"""Decision engine: from a raw event to major-line and ``latest`` ref changes.

Steps, in order:

    context_check -> semver_check -> resolve -> decide

``context_check`` rejects events reftag does not act on, ``semver_check``
rejects candidates that are not public semantic versions, ``resolve`` scans
the namespace for the latest versions, and ``decide`` compares the event with
the major line:

- deletion of the last ref of its major line: drop ``latest`` if it pointed
  at the deleted commit, leave the major ref alone;
- event above the major line (a deletion uncovered a lower ref): move the
  major ref to the resolved latest;
- event equal to the major line: move the major ref to it;
- event below the major line: stale, nothing changes.

Ref store failures end the run; mutations already applied stay in place and
the next run recomputes everything from the store.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from reftag.core.fsm import StepOutcome, UnknownStep, advance, finish, run_state_machine
from reftag.core.result import Err, Ok, Result
from reftag.output.console import ConsoleProtocol
from reftag.tagger.errors import TaggerError, context_error, semver_error, stale_error, transport_error
from reftag.tagger.event import Event, RawEvent, classify
from reftag.tagger.model import (
    LatestState,
    MutationResult,
    Preferences,
    RefRecord,
    latest_ref_name,
    major_ref_name,
)
from reftag.tagger.mutator import RefMutator
from reftag.tagger.resolver import LatestResolver
from reftag.tagger.scanner import RefScanner
from reftag.tagger.semver import SemVer, VersionParser


@dataclass(frozen=True, slots=True)
class _Run:
    step: str
    raw: RawEvent
    event: Event | None = None
    version: SemVer | None = None
    latest: LatestState | None = None
    outcome: MutationResult | None = None


_Outcome = Result[StepOutcome[_Run], TaggerError]


class DecisionEngine:
    def __init__(
        self,
        *,
        parser: VersionParser,
        scanner: RefScanner,
        resolver: LatestResolver,
        mutator: RefMutator,
        preferences: Preferences,
        console: ConsoleProtocol,
    ) -> None:
        self._parser = parser
        self._scanner = scanner
        self._resolver = resolver
        self._mutator = mutator
        self._preferences = preferences
        self._console = console

    def run(self, raw: RawEvent) -> Result[MutationResult, TaggerError]:
        result = run_state_machine(
            initial_state=_Run(step="context_check", raw=raw),
            get_step=lambda r: r.step,
            handlers={
                "context_check": self._context_check,
                "semver_check": self._semver_check,
                "resolve": self._resolve,
                "decide": self._decide,
            },
        )
        if isinstance(result, Err):
            if isinstance(result.error, UnknownStep):
                raise AssertionError(f"unknown decision step: {result.error.step}")
            return Err(result.error)

        outcome = result.value.outcome
        if outcome is None:
            raise AssertionError("decision finished without an outcome")
        return Ok(outcome)

    def _context_check(self, run: _Run) -> _Outcome:
        event = classify(run.raw)
        if event is None:
            self._console.debug(
                f"event: {run.raw.event_name} action={run.raw.action} ref={run.raw.ref}"
            )
            return Err(context_error())

        namespace = self._preferences.namespace
        if event.namespace is not None and event.namespace != namespace:
            self._console.debug(f"{event.variant}: {event.ref_name} is outside refs/{namespace}/")
            return Err(context_error())

        self._console.debug(f"event: {event.variant} {event.ref_name} @ {event.commit_id}")
        return Ok(advance(replace(run, step="semver_check", event=event)))

    def _semver_check(self, run: _Run) -> _Outcome:
        event = _required(run.event)
        version = self._parser.parse(event.ref_name)
        if version is None:
            return Err(semver_error(event.ref_name))
        if not version.is_stable:
            # Only plain X.Y.Z refs are tracked.
            self._console.debug(f"{event.ref_name} is a prerelease/build version")
            return Err(context_error())
        return Ok(advance(replace(run, step="resolve", version=version)))

    def _resolve(self, run: _Run) -> _Outcome:
        event = _required(run.event)
        version = _required(run.version)
        namespace = self._preferences.namespace

        record = RefRecord(
            name=f"{namespace}/{event.ref_name}",
            commit_id=event.commit_id,
            version=version,
        )
        latest = self._resolver.resolve(
            record,
            is_deletion=event.is_deletion,
            scanned=self._scanner.scan(namespace),
        )
        if isinstance(latest, Err):
            return Err(transport_error(latest.error))

        state = latest.value
        self._console.debug(
            f"repo latest: {_describe(state.repo_latest)}, "
            f"v{version.major} latest: {_describe(state.major_latest)}"
        )
        return Ok(advance(replace(run, step="decide", latest=state)))

    def _decide(self, run: _Run) -> _Outcome:
        event = _required(run.event)
        version = _required(run.version)
        latest = _required(run.latest)
        namespace = self._preferences.namespace
        major_ref = major_ref_name(namespace, version.major)

        major_latest = latest.major_latest
        if major_latest is None:
            # Only a deletion can empty the major line.
            self._console.info(f"No v{version.major} refs left, leaving {major_ref} unchanged")
            unlinked = self._mutator.unlink_latest_if_matching(event.commit_id)
            if isinstance(unlinked, Err):
                return Err(transport_error(unlinked.error))
            outcome = MutationResult(ref=None, target=None, published_latest=False)
            return Ok(finish(replace(run, outcome=outcome)))

        order = version.compare(major_latest.version)
        if order < 0:
            return Err(stale_error(str(version), str(major_latest.version)))
        if order > 0:
            self._console.info(
                f"{event.ref_name} was removed, {major_ref} falls back to {major_latest.version}"
            )

        target = major_latest
        updated = self._mutator.create_or_update_ref(major_ref, target.commit_id)
        if isinstance(updated, Err):
            return Err(transport_error(updated.error))

        published = self._preferences.publish_latest and latest.major_is_repo_latest
        if published:
            moved = self._mutator.create_or_update_ref(latest_ref_name(namespace), target.commit_id)
            if isinstance(moved, Err):
                return Err(transport_error(moved.error))
        elif event.is_deletion:
            unlinked = self._mutator.unlink_latest_if_matching(event.commit_id)
            if isinstance(unlinked, Err):
                return Err(transport_error(unlinked.error))

        outcome = MutationResult(ref=major_ref, target=target, published_latest=published)
        return Ok(finish(replace(run, outcome=outcome)))


def _required[T](value: T | None) -> T:
    if value is None:
        raise AssertionError("decision step reached before its inputs were set")
    return value


def _describe(record: RefRecord | None) -> str:
    if record is None:
        return "none"
    return f"{record.version} ({record.commit_id})"
