from __future__ import annotations

import pytest

from sluice.errors import (
    ConfigurationError,
    ParseError,
    RuleViolationError,
    SluiceError,
    UnwrapError,
)

pytestmark = pytest.mark.unit


def test_hint_is_rendered_after_message() -> None:
    err = SluiceError("boom", hint="do this")
    assert str(err) == "boom. do this"
    assert err.message == "boom"
    assert err.hint == "do this"


def test_hint_defaults_to_none() -> None:
    err = SluiceError("fail")
    assert err.hint is None
    assert str(err) == "fail"


def test_subclass_hierarchy() -> None:
    for cls in (ConfigurationError, UnwrapError):
        assert issubclass(cls, SluiceError)
    assert isinstance(ParseError("x", raw="r"), SluiceError)
    assert isinstance(RuleViolationError("x", field="f"), SluiceError)


def test_payload_errors_carry_context() -> None:
    parse = ParseError("expected 3 fields, got 1", raw="Invalid input")
    rule = RuleViolationError("age 12 is below the minimum of 18", field="age")
    assert parse.raw == "Invalid input"
    assert rule.field == "age"


def test_payload_errors_compare_by_content() -> None:
    assert ParseError("m", raw="r") == ParseError("m", raw="r", hint="ignored")
    assert ParseError("m", raw="r") != ParseError("m", raw="other")
    assert RuleViolationError("m", field="age") != RuleViolationError("m", field="name")
    assert ParseError("m", raw="r") != RuleViolationError("m", field="r")
    assert len({ParseError("m", raw="r"), ParseError("m", raw="r")}) == 1
