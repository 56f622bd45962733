from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from reftag.tagger.semver import SemVer

Namespace = Literal["tags", "heads"]

LATEST_REF = "latest"


@dataclass(frozen=True, slots=True)
class Preferences:
    """Per-run choices supplied by the workflow."""

    prefer_branch_release: bool = False
    publish_latest: bool = False

    @property
    def namespace(self) -> Namespace:
        return "heads" if self.prefer_branch_release else "tags"


@dataclass(frozen=True, slots=True)
class RefRecord:
    name: str
    commit_id: str
    version: SemVer


@dataclass(frozen=True, slots=True)
class LatestState:
    """Highest tracked versions after a scan.

    ``major_latest`` is None only when no stable ref of the event's major line
    exists, which happens after deleting the last one.
    """

    repo_latest: RefRecord | None
    major_latest: RefRecord | None

    @property
    def major_is_repo_latest(self) -> bool:
        if self.repo_latest is None or self.major_latest is None:
            return False
        return self.repo_latest.version == self.major_latest.version


@dataclass(frozen=True, slots=True)
class MutationResult:
    """What a run changed.

    Attributes:
        ref: Major-line ref name that was created or moved (``tags/v3``),
            or None when the run left the major line untouched.
        target: Record the major-line ref now points at.
        published_latest: Whether ``latest`` was created or moved.
    """

    ref: str | None
    target: RefRecord | None
    published_latest: bool


def major_ref_name(namespace: Namespace, major: int) -> str:
    return f"{namespace}/v{major}"


def latest_ref_name(namespace: Namespace) -> str:
    return f"{namespace}/{LATEST_REF}"
