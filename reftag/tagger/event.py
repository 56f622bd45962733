"""Triggering event: raw descriptor and its classified variants.

The runner hands us an event name, a JSON payload and a commit id. Push and
release payloads overlap only partially, so ``classify`` narrows them once
into one of six variants, each carrying just the fields it needs.

See: https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
See also: https://docs.github.com/en/webhooks/webhook-events-and-payloads#release
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import ClassVar

from reftag.core.config import ConfigError
from reftag.core.result import Err, Ok, Result
from reftag.core.structured import as_str_dict, get_bool, get_str, get_table
from reftag.tagger.model import Namespace

_TAGS_PREFIX = "refs/tags/"
_HEADS_PREFIX = "refs/heads/"

# "released" is what GitHub sends alongside "published" for full releases.
_PUBLISH_ACTIONS = frozenset({"published", "released"})


@dataclass(frozen=True, slots=True)
class RawEvent:
    """Event descriptor as delivered by the runner, before classification."""

    event_name: str
    commit_id: str
    action: str | None = None
    ref: str | None = None
    created: bool = False
    deleted: bool = False
    before: str | None = None
    release_tag: str | None = None
    release_prerelease: bool = False

    @classmethod
    def from_payload(
        cls,
        *,
        event_name: str,
        payload: Mapping[str, object],
        commit_id: str,
    ) -> RawEvent:
        release = get_table(payload, "release") or {}
        return cls(
            event_name=event_name,
            commit_id=commit_id,
            action=get_str(payload, "action"),
            ref=get_str(payload, "ref"),
            created=get_bool(payload, "created"),
            deleted=get_bool(payload, "deleted"),
            before=get_str(payload, "before"),
            release_tag=get_str(release, "tag_name"),
            release_prerelease=get_bool(release, "prerelease"),
        )


def load_event(
    *,
    event_name: str,
    event_path: Path | None,
    commit_id: str,
) -> Result[RawEvent, ConfigError]:
    """Build the raw event from the runner's payload file.

    A missing payload file is not an error: the descriptor then only knows
    the event name and commit, and classification will reject it.
    """
    if event_path is None:
        return Ok(RawEvent(event_name=event_name, commit_id=commit_id))

    try:
        obj: object = json.loads(event_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"event payload not found: {event_path}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"cannot read event payload: {e}"))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"invalid event payload JSON: {e}"))

    payload = as_str_dict(obj)
    if payload is None:
        return Err(ConfigError("event payload must be a JSON object"))

    return Ok(RawEvent.from_payload(event_name=event_name, payload=payload, commit_id=commit_id))


class EventVariant(StrEnum):
    TAG_PUSH = "tag_push"
    BRANCH_PUSH = "branch_push"
    TAG_DELETE = "tag_delete"
    BRANCH_DELETE = "branch_delete"
    RELEASE_PUBLISHED = "release_published"
    RELEASE_EDITED = "release_edited"


@dataclass(frozen=True, slots=True)
class TagPush:
    variant: ClassVar[EventVariant] = EventVariant.TAG_PUSH
    namespace: ClassVar[Namespace | None] = "tags"
    is_deletion: ClassVar[bool] = False

    ref_name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class BranchPush:
    variant: ClassVar[EventVariant] = EventVariant.BRANCH_PUSH
    namespace: ClassVar[Namespace | None] = "heads"
    is_deletion: ClassVar[bool] = False

    ref_name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class TagDelete:
    variant: ClassVar[EventVariant] = EventVariant.TAG_DELETE
    namespace: ClassVar[Namespace | None] = "tags"
    is_deletion: ClassVar[bool] = True

    ref_name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class BranchDelete:
    variant: ClassVar[EventVariant] = EventVariant.BRANCH_DELETE
    namespace: ClassVar[Namespace | None] = "heads"
    is_deletion: ClassVar[bool] = True

    ref_name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class ReleasePublished:
    """A release went public. Its tag may drive either namespace."""

    variant: ClassVar[EventVariant] = EventVariant.RELEASE_PUBLISHED
    namespace: ClassVar[Namespace | None] = None
    is_deletion: ClassVar[bool] = False

    ref_name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class ReleaseEdited:
    variant: ClassVar[EventVariant] = EventVariant.RELEASE_EDITED
    namespace: ClassVar[Namespace | None] = None
    is_deletion: ClassVar[bool] = False

    ref_name: str
    commit_id: str


Event = TagPush | BranchPush | TagDelete | BranchDelete | ReleasePublished | ReleaseEdited


def _classify_push(raw: RawEvent) -> Event | None:
    ref = raw.ref
    if ref is None:
        return None

    if raw.created and not raw.deleted:
        if ref.startswith(_TAGS_PREFIX):
            return TagPush(ref_name=ref.removeprefix(_TAGS_PREFIX), commit_id=raw.commit_id)
        if ref.startswith(_HEADS_PREFIX):
            return BranchPush(ref_name=ref.removeprefix(_HEADS_PREFIX), commit_id=raw.commit_id)
        return None

    if raw.deleted:
        # After a deletion the runner's commit is not the one the ref held.
        commit_id = raw.before or raw.commit_id
        if ref.startswith(_TAGS_PREFIX):
            return TagDelete(ref_name=ref.removeprefix(_TAGS_PREFIX), commit_id=commit_id)
        if ref.startswith(_HEADS_PREFIX):
            return BranchDelete(ref_name=ref.removeprefix(_HEADS_PREFIX), commit_id=commit_id)

    return None


def _classify_release(raw: RawEvent) -> Event | None:
    # Prereleases are also "published", so the flag has to be checked separately.
    if raw.release_prerelease or raw.release_tag is None:
        return None
    if raw.action in _PUBLISH_ACTIONS:
        return ReleasePublished(ref_name=raw.release_tag, commit_id=raw.commit_id)
    if raw.action == "edited":
        return ReleaseEdited(ref_name=raw.release_tag, commit_id=raw.commit_id)
    return None


def classify(raw: RawEvent) -> Event | None:
    """Narrow a raw event to its variant; None when reftag should not act on it."""
    match raw.event_name:
        case "push":
            return _classify_push(raw)
        case "release":
            return _classify_release(raw)
        case _:
            return None
