"""Tests for reftag.core.result."""

from __future__ import annotations

import pytest

from reftag.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    def test_value_and_flags(self) -> None:
        result = Ok("tags/v3")
        assert result.value == "tags/v3"
        assert result.is_ok()
        assert not result.is_err()

    def test_repr(self) -> None:
        assert repr(Ok("x")) == "Ok('x')"


class TestErr:
    def test_error_and_flags(self) -> None:
        result = Err("boom")
        assert result.error == "boom"
        assert result.is_err()
        assert not result.is_ok()


def _major(raw: str) -> Result[int, str]:
    if not raw.startswith("v"):
        return Err(f"no prefix: {raw}")
    return Ok(int(raw[1:].split(".")[0]))


def test_type_guards() -> None:
    good = _major("v3.2.0")
    bad = _major("3.2.0")
    assert is_ok(good) and good.value == 3
    assert is_err(bad) and "no prefix" in bad.error


def test_pattern_matching() -> None:
    match _major("v4.0.0"):
        case Ok(value):
            assert value == 4
        case Err(_):
            pytest.fail("expected Ok")
