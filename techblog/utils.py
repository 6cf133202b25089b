from __future__ import annotations

import datetime as dt
from email.utils import format_datetime

TRUE_WORDS = {"1", "true", "yes", "y", "on"}


def parse_bool(value: object) -> bool:
    """Read a front matter or config flag; unknown values count as False."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_WORDS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def naive_utc(value: dt.datetime) -> dt.datetime:
    """Post dates are compared as naive datetimes; offsets are folded into UTC first."""
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def join_url(base: str, path: str) -> str:
    path = path.lstrip("/")
    return f"{base.rstrip('/')}/{path}" if path else base.rstrip("/")


def rfc822_date(value: dt.datetime) -> str:
    # naive post dates are UTC, see naive_utc
    return format_datetime(naive_utc(value).replace(tzinfo=dt.timezone.utc))
