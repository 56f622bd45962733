"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reftag.core.config import ConfigError
from reftag.core.errors import ErrorCode
from reftag.output.console import Style
from reftag.tagger.errors import TaggerError

if TYPE_CHECKING:
    from reftag.output.console import ConsoleProtocol

__all__ = [
    "print_config_error",
    "print_tagger_error",
    "tagger_error_exit_code",
]


def print_tagger_error(
    error: TaggerError,
    console: ConsoleProtocol,
    *,
    event_name: str,
    candidate: str | None,
    strict: bool = False,
) -> None:
    """Print a run failure.

    Validation failures are warnings unless ``strict`` is set; ref store
    failures are always errors.
    """
    match error:
        case TaggerError(kind="transport", message=message):
            console.error(message)
            console.print("mutations completed before the failure stay in effect", Style.DIM)
        case TaggerError(kind="stale", message=message, hint=hint):
            _report(console, message, strict=strict)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case TaggerError(message=message, hint=hint):
            _report(console, message, strict=strict)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
            console.print(
                "If you believe this to be an error, please submit a bug report",
                Style.DIM,
            )

    console.debug(f"event name: {event_name}")
    console.debug(f"ref: {candidate if candidate is not None else '(none)'}")


def _report(console: ConsoleProtocol, message: str, *, strict: bool) -> None:
    if strict:
        console.error(message)
    else:
        console.warning(message)


def tagger_error_exit_code(error: TaggerError, *, strict: bool = False) -> int:
    """Get exit code for a run failure."""
    match error.kind:
        case "transport":
            return int(ErrorCode.NETWORK_ERROR)
        case "context" | "semver" | "stale":
            return int(ErrorCode.USER_ERROR) if strict else int(ErrorCode.OK)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
