"""Semantic version parsing and precedence (semver 2.0.0).

Precedence rules:
- major, minor and patch compare numerically;
- a prerelease version is lower than the same version without one;
- prerelease identifiers compare field by field: numeric identifiers
  numerically, alphanumeric ones in ASCII order, numeric below alphanumeric,
  and a shorter list that prefixes a longer one is lower;
- build metadata never affects precedence, including equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

_SEMVER_RE = re.compile(
    r"^v?"
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)

_Identifier = tuple[int, int | str]


def _identifier_key(identifier: str) -> _Identifier:
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


@dataclass(frozen=True, slots=True, eq=False)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()
    raw: str = ""

    @property
    def is_stable(self) -> bool:
        """True for plain ``X.Y.Z`` versions, the only ones that are tracked."""
        return not self.prerelease and not self.build

    @property
    def version(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def precedence_key(self) -> tuple[int, int, int, int, tuple[_Identifier, ...]]:
        pre = tuple(_identifier_key(i) for i in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if pre else 1, pre)

    def compare(self, other: SemVer) -> int:
        """Three-way comparison: -1, 0 or 1."""
        a, b = self.precedence_key(), other.precedence_key()
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.compare(other) == 0

    def __hash__(self) -> int:
        return hash(self.precedence_key())

    def __lt__(self, other: SemVer) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: SemVer) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: SemVer) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: SemVer) -> bool:
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self.version


def parse_version(raw: str) -> SemVer | None:
    """Parse ``raw`` (optionally prefixed with ``v``); None if it is not semver."""
    m = _SEMVER_RE.match(raw.strip())
    if m is None:
        return None
    pre = tuple(m.group(4).split(".")) if m.group(4) else ()
    build = tuple(m.group(5).split(".")) if m.group(5) else ()
    return SemVer(
        int(m.group(1)),
        int(m.group(2)),
        int(m.group(3)),
        prerelease=pre,
        build=build,
        raw=raw,
    )


class VersionParser(Protocol):
    def parse(self, raw: str) -> SemVer | None: ...


class SemVerParser:
    """Default ``VersionParser``."""

    def parse(self, raw: str) -> SemVer | None:
        return parse_version(raw)
