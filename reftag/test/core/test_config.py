"""Tests for reftag.core.config."""

from __future__ import annotations

from pathlib import Path

from reftag.core.config import DEFAULT_API_URL, load_inputs
from reftag.core.result import Err, Ok


def _env(**overrides: str) -> dict[str, str]:
    env = {
        "INPUT_TOKEN": "t0k3n",
        "GITHUB_REPOSITORY": "octo/widgets",
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_SHA": "abc123",
    }
    env.update(overrides)
    return env


def test_minimal_environment() -> None:
    result = load_inputs(_env())
    assert isinstance(result, Ok)
    inputs = result.value
    assert inputs.token == "t0k3n"
    assert inputs.repository == "octo/widgets"
    assert inputs.event_name == "push"
    assert inputs.sha == "abc123"
    assert inputs.event_path is None
    assert inputs.output_path is None
    assert inputs.publish_latest is False
    assert inputs.prefer_branch_releases is False
    assert inputs.api_url == DEFAULT_API_URL
    assert inputs.graphql_url == f"{DEFAULT_API_URL}/graphql"
    assert inputs.debug is False
    assert inputs.deprecations == ()


def test_flags_are_case_insensitive() -> None:
    result = load_inputs(
        _env(INPUT_PUBLISH_LATEST="TRUE", INPUT_PREFER_BRANCH_RELEASES="True")
    )
    assert isinstance(result, Ok)
    assert result.value.publish_latest is True
    assert result.value.prefer_branch_releases is True


def test_non_true_flag_is_false() -> None:
    result = load_inputs(_env(INPUT_PUBLISH_LATEST="yes"))
    assert isinstance(result, Ok)
    assert result.value.publish_latest is False


def test_deprecated_publish_latest_tag() -> None:
    result = load_inputs(_env(INPUT_PUBLISH_LATEST_TAG="true"))
    assert isinstance(result, Ok)
    assert result.value.publish_latest is True
    assert any("INPUT_PUBLISH_LATEST_TAG" in d for d in result.value.deprecations)


def test_publish_latest_wins_over_deprecated_input() -> None:
    result = load_inputs(_env(INPUT_PUBLISH_LATEST="false", INPUT_PUBLISH_LATEST_TAG="true"))
    assert isinstance(result, Ok)
    assert result.value.publish_latest is False
    assert result.value.deprecations == ()


def test_github_token_takes_precedence_with_notice() -> None:
    result = load_inputs(_env(GITHUB_TOKEN="legacy"))
    assert isinstance(result, Ok)
    assert result.value.token == "legacy"
    assert any("GITHUB_TOKEN" in d for d in result.value.deprecations)


def test_missing_token() -> None:
    env = _env()
    del env["INPUT_TOKEN"]
    result = load_inputs(env)
    assert isinstance(result, Err)
    assert result.error.message == "missing token"
    assert result.error.hint is not None


def test_blank_values_count_as_missing() -> None:
    result = load_inputs(_env(GITHUB_SHA="   "))
    assert isinstance(result, Err)
    assert "GITHUB_SHA" in result.error.message


def test_invalid_repository() -> None:
    for repo in ("widgets", "octo/", "/widgets", "a/b/c"):
        result = load_inputs(_env(GITHUB_REPOSITORY=repo))
        assert isinstance(result, Err), repo
        assert "invalid repository" in result.error.message


def test_missing_event_name() -> None:
    env = _env()
    del env["GITHUB_EVENT_NAME"]
    result = load_inputs(env)
    assert isinstance(result, Err)
    assert "GITHUB_EVENT_NAME" in result.error.message


def test_paths_urls_and_debug(tmp_path: Path) -> None:
    result = load_inputs(
        _env(
            GITHUB_EVENT_PATH=str(tmp_path / "event.json"),
            GITHUB_OUTPUT=str(tmp_path / "out"),
            GITHUB_API_URL="https://ghe.example.com/api/v3/",
            RUNNER_DEBUG="1",
        )
    )
    assert isinstance(result, Ok)
    inputs = result.value
    assert inputs.event_path == tmp_path / "event.json"
    assert inputs.output_path == tmp_path / "out"
    assert inputs.api_url == "https://ghe.example.com/api/v3"
    assert inputs.graphql_url == "https://ghe.example.com/api/v3/graphql"
    assert inputs.debug is True


def test_explicit_graphql_url() -> None:
    result = load_inputs(_env(GITHUB_GRAPHQL_URL="https://ghe.example.com/api/graphql"))
    assert isinstance(result, Ok)
    assert result.value.graphql_url == "https://ghe.example.com/api/graphql"
