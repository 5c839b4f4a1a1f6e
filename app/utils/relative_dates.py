# app/utils/relative_dates.py
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# Order matters: the first unit found in the string wins.
_UNIT_SECONDS = (
    ("minute", 60),
    ("hour", 3600),
    ("day", 86400),
    ("week", 604800),
)

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return _as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_relative_date(value: Optional[str], now: datetime) -> str:
    """
    Turn a feed timestamp such as ``"3 hours ago"`` into an absolute instant.

    Anything without a leading integer and a known unit (minute, hour, day,
    week) resolves to ``now``; this never raises.
    """
    now = _as_utc(now)
    text = (value or "").lower()
    match = _LEADING_INT_RE.match(text)
    if not match:
        return isoformat_utc(now)

    count = int(match.group(1))
    for unit, seconds in _UNIT_SECONDS:
        if unit in text:
            try:
                return isoformat_utc(now - timedelta(seconds=count * seconds))
            except OverflowError:
                break
    return isoformat_utc(now)
