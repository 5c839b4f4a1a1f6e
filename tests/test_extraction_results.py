from __future__ import annotations

from app.core.results import FatalError, NotFound, Ok, TransientError, first_found, found


def test_found_treats_blank_as_not_found():
    assert found(None) == NotFound()
    assert found("   ") == NotFound()
    assert found("value") == Ok("value")


def test_first_found_returns_first_ok():
    calls = []

    def missing(_):
        calls.append("missing")
        return NotFound()

    def hit(_):
        calls.append("hit")
        return Ok("yes")

    def never(_):
        calls.append("never")
        return Ok("no")

    assert first_found("field", [missing, hit, never], object()) == Ok("yes")
    assert calls == ["missing", "hit"]


def test_first_found_skips_transient_and_raising_strategies():
    def flaky(_):
        return TransientError("odd markup")

    def broken(_):
        raise ValueError("bad selector")

    def hit(_):
        return Ok(1)

    assert first_found("field", [flaky, broken, hit], object()) == Ok(1)


def test_first_found_stops_on_fatal():
    def fatal(_):
        return FatalError("document is empty")

    def hit(_):
        return Ok(1)

    assert first_found("field", [fatal, hit], object()) == FatalError("document is empty")


def test_first_found_exhausted_is_not_found():
    assert first_found("field", [], object()) == NotFound()
