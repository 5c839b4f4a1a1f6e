# app/core/request_id.py
"""Correlation ids kept in contextvars: one per API request, one per CLI run."""
from __future__ import annotations

import contextvars
import re
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

_request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)
_run_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("run_id", default=None)

# Caller-supplied ids land in every log line, so only short printable tokens are reused.
_INCOMING_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_id() -> str:
    return uuid.uuid4().hex


def resolve_request_id(header_value: Optional[str]) -> str:
    """Reuse a well-formed ``X-Request-Id`` header value, otherwise mint a fresh id."""
    candidate = (header_value or "").strip()
    if candidate and _INCOMING_ID_RE.match(candidate):
        return candidate
    return new_id()


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


@contextmanager
def request_scope(request_id: str) -> Iterator[str]:
    token = _request_id_ctx.set(request_id)
    try:
        yield request_id
    finally:
        _request_id_ctx.reset(token)


def get_run_id() -> Optional[str]:
    return _run_id_ctx.get()


@contextmanager
def with_run_id(run_id: Optional[str] = None) -> Iterator[str]:
    """
    Tag every log line emitted inside the block with one run id:
        with with_run_id():
            asyncio.run(...)
    """
    rid = run_id or new_id()
    token = _run_id_ctx.set(rid)
    try:
        yield rid
    finally:
        _run_id_ctx.reset(token)
