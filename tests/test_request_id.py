from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.request_id import get_request_id, get_run_id, request_scope, resolve_request_id, with_run_id
from app.main import app

client = TestClient(app)


def test_resolve_request_id_reuses_clean_header():
    assert resolve_request_id("abc-123.X_y") == "abc-123.X_y"
    assert resolve_request_id("  abc  ") == "abc"


def test_resolve_request_id_mints_for_bad_header():
    for value in (None, "", "has space", "x" * 65, "line\nbreak"):
        minted = resolve_request_id(value)
        assert len(minted) == 32
        assert minted != value


def test_scopes_restore_previous_value():
    assert get_request_id() is None
    with request_scope("outer"):
        with request_scope("inner"):
            assert get_request_id() == "inner"
        assert get_request_id() == "outer"
    assert get_request_id() is None

    with with_run_id("run-1") as rid:
        assert rid == "run-1"
        assert get_run_id() == "run-1"
    assert get_run_id() is None


def test_response_echoes_request_id():
    response = client.get("/health", headers={"X-Request-Id": "trace-42"})
    assert response.headers["x-request-id"] == "trace-42"

    minted = client.get("/health").headers["x-request-id"]
    assert len(minted) == 32
