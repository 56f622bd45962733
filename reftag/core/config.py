"""Typed run configuration.

reftag runs as a workflow step, so its configuration is the runner
environment: ``INPUT_*`` variables carry the step inputs and ``GITHUB_*``
variables describe the repository and the triggering event. This module turns
that environment into a frozen ``ActionInputs`` value once per run.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "ActionInputs",
    "ConfigError",
    "DEFAULT_API_URL",
    "load_inputs",
]

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the runner environment is incomplete or malformed."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Everything a run needs from its environment.

    Attributes:
        repository: Target repository as ``owner/name``.
        token: Credential for the ref store; opaque to reftag.
        event_name: ``push`` or ``release`` for events reftag acts on.
        sha: Commit the triggering event refers to.
        event_path: JSON payload of the triggering event, if provided.
        publish_latest: Whether the floating ``latest`` ref may be published.
        prefer_branch_releases: Track ``heads/`` instead of ``tags/``.
        output_path: File step outputs are appended to.
        deprecations: Notices about deprecated inputs that were used.
    """

    repository: str
    token: str
    event_name: str
    sha: str
    event_path: Path | None = None
    publish_latest: bool = False
    prefer_branch_releases: bool = False
    api_url: str = DEFAULT_API_URL
    graphql_url: str = f"{DEFAULT_API_URL}/graphql"
    output_path: Path | None = None
    debug: bool = False
    deprecations: tuple[str, ...] = ()


def _get(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _flag(value: str | None) -> bool:
    return value is not None and value.lower() == "true"


def _path(environ: Mapping[str, str], key: str) -> Path | None:
    value = _get(environ, key)
    if value is None:
        return None
    return Path(value)


def load_inputs(environ: Mapping[str, str]) -> Result[ActionInputs, ConfigError]:
    """Read run configuration from a runner environment.

    Args:
        environ: Usually ``os.environ``; CLI options are merged in beforehand.

    Returns:
        Ok(ActionInputs), or Err(ConfigError) naming the missing variable.
    """
    deprecations: list[str] = []

    publish_raw = _get(environ, "INPUT_PUBLISH_LATEST")
    if publish_raw is None:
        publish_raw = _get(environ, "INPUT_PUBLISH_LATEST_TAG")
        if publish_raw is not None:
            deprecations.append(
                "INPUT_PUBLISH_LATEST_TAG is deprecated: use the publish_latest input"
            )

    token = _get(environ, "GITHUB_TOKEN")
    if token is not None:
        deprecations.append(
            "Using obsolete GITHUB_TOKEN environment variable: use the token input instead. "
            "In most cases the default value works and the variable can be removed."
        )
    else:
        token = _get(environ, "INPUT_TOKEN")
    if token is None:
        return Err(
            ConfigError(
                "missing token",
                hint="Pass the token input (INPUT_TOKEN) or --token.",
            )
        )

    repository = _get(environ, "GITHUB_REPOSITORY")
    if repository is None:
        return Err(ConfigError("missing GITHUB_REPOSITORY", hint="Pass --repo owner/name."))
    owner, sep, name = repository.partition("/")
    if not sep or not owner or not name or "/" in name:
        return Err(
            ConfigError(
                f"invalid repository: {repository}",
                hint="Expected owner/name.",
            )
        )

    event_name = _get(environ, "GITHUB_EVENT_NAME")
    if event_name is None:
        return Err(ConfigError("missing GITHUB_EVENT_NAME", hint="Pass --event-name."))

    sha = _get(environ, "GITHUB_SHA")
    if sha is None:
        return Err(ConfigError("missing GITHUB_SHA", hint="Pass --sha."))

    api_url = (_get(environ, "GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
    graphql_url = _get(environ, "GITHUB_GRAPHQL_URL") or f"{api_url}/graphql"

    return Ok(
        ActionInputs(
            repository=repository,
            token=token,
            event_name=event_name,
            sha=sha,
            event_path=_path(environ, "GITHUB_EVENT_PATH"),
            publish_latest=_flag(publish_raw),
            prefer_branch_releases=_flag(_get(environ, "INPUT_PREFER_BRANCH_RELEASES")),
            api_url=api_url,
            graphql_url=graphql_url,
            output_path=_path(environ, "GITHUB_OUTPUT"),
            debug=_get(environ, "RUNNER_DEBUG") == "1",
            deprecations=tuple(deprecations),
        )
    )
