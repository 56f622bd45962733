"""Error payloads for ref tracking runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from reftag.github.http import HttpError

TaggerErrorKind = Literal["context", "semver", "stale", "transport"]

CONTEXT_MESSAGE = (
    "reftag should only be used in a release context "
    "or when creating/deleting a tag or branch"
)
SEMVER_MESSAGE = "reftag can only operate on semantically versioned refs"
STALE_MESSAGE = "Nothing to do because ref id is earlier than major tag commit"

DOCS_HINT = "See the README for the events and ref names reftag acts on."
SEMVER_HINT = "See: https://semver.org/"


@dataclass(frozen=True, slots=True)
class TaggerError:
    """Why a run stopped.

    ``context``, ``semver`` and ``stale`` are expected outcomes of validating
    an event and never leave a partial mutation behind. ``transport`` carries
    a ref store failure verbatim; mutations completed before it stay in
    effect.
    """

    kind: TaggerErrorKind
    message: str
    hint: str | None = None


def context_error() -> TaggerError:
    return TaggerError(kind="context", message=CONTEXT_MESSAGE, hint=DOCS_HINT)


def semver_error(candidate: str) -> TaggerError:
    return TaggerError(
        kind="semver",
        message=f"{SEMVER_MESSAGE}: {candidate!r}",
        hint=SEMVER_HINT,
    )


def stale_error(version: str, major_latest: str) -> TaggerError:
    return TaggerError(
        kind="stale",
        message=f"{STALE_MESSAGE} ({version} < {major_latest})",
        hint=DOCS_HINT,
    )


def transport_error(error: HttpError) -> TaggerError:
    return TaggerError(kind="transport", message=str(error))
