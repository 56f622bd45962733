from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from reftag.core.config import ActionInputs, load_inputs
from reftag.core.errors import ErrorCode
from reftag.core.result import Err
from reftag.github.http import RealHttpClient
from reftag.github.store import GitHubRefStore, RefStore
from reftag.output.console import ConsoleProtocol, RichConsole
from reftag.tagger.engine import DecisionEngine
from reftag.tagger.model import Preferences
from reftag.tagger.mutator import StoreRefMutator
from reftag.tagger.resolver import LinearLatestResolver
from reftag.tagger.scanner import StoreRefScanner
from reftag.tagger.semver import SemVerParser


@dataclass(frozen=True, slots=True)
class RunOverrides:
    """Command-line values that replace their environment counterparts."""

    token: str | None = None
    repo: str | None = None
    event_name: str | None = None
    event_path: Path | None = None
    sha: str | None = None
    publish_latest: bool | None = None
    prefer_branch_releases: bool | None = None
    debug: bool = False


@dataclass(frozen=True, slots=True)
class CLIContext:
    inputs: ActionInputs
    preferences: Preferences
    console: ConsoleProtocol
    store: RefStore


def merge_overrides(environ: Mapping[str, str], overrides: RunOverrides) -> dict[str, str]:
    env = dict(environ)
    if overrides.token is not None:
        # GITHUB_TOKEN wins over INPUT_TOKEN, so an explicit --token must drop it.
        env.pop("GITHUB_TOKEN", None)
        env["INPUT_TOKEN"] = overrides.token
    if overrides.repo is not None:
        env["GITHUB_REPOSITORY"] = overrides.repo
    if overrides.event_name is not None:
        env["GITHUB_EVENT_NAME"] = overrides.event_name
    if overrides.event_path is not None:
        env["GITHUB_EVENT_PATH"] = str(overrides.event_path)
    if overrides.sha is not None:
        env["GITHUB_SHA"] = overrides.sha
    if overrides.publish_latest is not None:
        env.pop("INPUT_PUBLISH_LATEST_TAG", None)
        env["INPUT_PUBLISH_LATEST"] = "true" if overrides.publish_latest else "false"
    if overrides.prefer_branch_releases is not None:
        env["INPUT_PREFER_BRANCH_RELEASES"] = "true" if overrides.prefer_branch_releases else "false"
    if overrides.debug:
        env["RUNNER_DEBUG"] = "1"
    return env


def _make_store(inputs: ActionInputs) -> RefStore:
    return GitHubRefStore(
        RealHttpClient(inputs.token),
        repository=inputs.repository,
        api_url=inputs.api_url,
        graphql_url=inputs.graphql_url,
    )


def build_context(overrides: RunOverrides, environ: Mapping[str, str] | None = None) -> CLIContext:
    env = merge_overrides(os.environ if environ is None else environ, overrides)
    inputs_result = load_inputs(env)
    if isinstance(inputs_result, Err):
        typer.echo(f"error: {inputs_result.error.message}", err=True)
        if inputs_result.error.hint:
            typer.echo(f"hint: {inputs_result.error.hint}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    inputs = inputs_result.value
    return CLIContext(
        inputs=inputs,
        preferences=Preferences(
            prefer_branch_release=inputs.prefer_branch_releases,
            publish_latest=inputs.publish_latest,
        ),
        console=RichConsole(debug=inputs.debug),
        store=_make_store(inputs),
    )


def build_engine(ctx: CLIContext) -> DecisionEngine:
    parser = SemVerParser()
    return DecisionEngine(
        parser=parser,
        scanner=StoreRefScanner(ctx.store, parser, ctx.console),
        resolver=LinearLatestResolver(),
        mutator=StoreRefMutator(ctx.store, ctx.preferences.namespace, ctx.console),
        preferences=ctx.preferences,
        console=ctx.console,
    )
