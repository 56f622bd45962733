from __future__ import annotations

from pathlib import Path

import typer

from reftag.cli.context import CLIContext, RunOverrides, build_context, build_engine
from reftag.core.errors import ErrorCode
from reftag.core.result import Err
from reftag.output.errors import print_config_error, print_tagger_error, tagger_error_exit_code
from reftag.output.step_outputs import outputs_for, write_outputs
from reftag.tagger.event import RawEvent, load_event
from reftag.tagger.model import MutationResult


def run(
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail when the event is not one reftag acts on.",
    ),
    publish_latest: bool | None = typer.Option(
        None,
        "--publish-latest/--no-publish-latest",
        help="Also move the 'latest' ref (overrides INPUT_PUBLISH_LATEST).",
    ),
    prefer_branch_releases: bool | None = typer.Option(
        None,
        "--prefer-branch-releases/--no-prefer-branch-releases",
        help="Track branches instead of tags (overrides INPUT_PREFER_BRANCH_RELEASES).",
    ),
    event_path: Path | None = typer.Option(None, "--event-path", help="Event payload JSON."),
    event_name: str | None = typer.Option(None, "--event-name", help="push or release."),
    sha: str | None = typer.Option(None, "--sha", help="Commit of the triggering event."),
    repo: str | None = typer.Option(None, "--repo", help="Repository as owner/name."),
    token: str | None = typer.Option(None, "--token", help="Token for the GitHub API."),
    debug: bool = typer.Option(False, "--debug", help="Show debug output."),
) -> None:
    """Update the major-line ref (and optionally 'latest') for one event."""
    ctx = build_context(
        RunOverrides(
            token=token,
            repo=repo,
            event_name=event_name,
            event_path=event_path,
            sha=sha,
            publish_latest=publish_latest,
            prefer_branch_releases=prefer_branch_releases,
            debug=debug,
        )
    )
    process_event(ctx, strict=strict)


def process_event(ctx: CLIContext, *, strict: bool) -> None:
    console = ctx.console
    inputs = ctx.inputs
    for notice in inputs.deprecations:
        console.warning(notice)

    event_result = load_event(
        event_name=inputs.event_name,
        event_path=inputs.event_path,
        commit_id=inputs.sha,
    )
    if isinstance(event_result, Err):
        print_config_error(event_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    raw = event_result.value

    result = build_engine(ctx).run(raw)
    if isinstance(result, Err):
        print_tagger_error(
            result.error,
            console,
            event_name=raw.event_name,
            candidate=_candidate(raw),
            strict=strict,
        )
        code = tagger_error_exit_code(result.error, strict=strict)
        if code != int(ErrorCode.OK):
            raise typer.Exit(code=code)
        return

    _report(ctx, result.value)
    written = write_outputs(inputs.output_path, outputs_for(result.value), console)
    if isinstance(written, Err):
        console.error(f"cannot write step outputs to {written.error.path}: {written.error.message}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))


def _candidate(raw: RawEvent) -> str | None:
    if raw.release_tag is not None:
        return raw.release_tag
    return raw.ref


def _report(ctx: CLIContext, outcome: MutationResult) -> None:
    if outcome.ref is None or outcome.target is None:
        ctx.console.success("no major-line ref to update")
    else:
        ctx.console.success(f"{outcome.ref} -> {outcome.target.version} ({outcome.target.commit_id})")
    if outcome.published_latest:
        ctx.console.success(f"{ctx.preferences.namespace}/latest published")
