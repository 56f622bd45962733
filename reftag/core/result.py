"""Result type for explicit error handling.

Every operation that talks to the ref store, reads the runner environment or
validates an event returns a ``Result`` instead of raising. Callers branch on
the variant, so a failed page fetch or a stale release can never be mistaken
for success.

Usage:
    def major_ref(raw: str) -> Result[str, str]:
        version = parse_version(raw)
        if version is None:
            return Err(f"not a semantic version: {raw}")
        return Ok(f"tags/v{version.major}")

    match major_ref("v3.2.0"):
        case Ok(name):
            print(name)
        case Err(error):
            print(error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeGuard


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


def is_ok[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Narrow a Result to Ok for static type checkers."""
    return isinstance(result, Ok)


def is_err[T, E](result: Result[T, E]) -> TypeGuard[Err[E]]:
    """Narrow a Result to Err for static type checkers."""
    return isinstance(result, Err)
