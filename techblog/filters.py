from __future__ import annotations

import datetime as dt
import html
import math
from collections.abc import Mapping, Sequence

from .render import strip_tags
from .views import related_posts

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 150
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MISSING = object()


def reading_time(content: object) -> int:
    if not content:
        return 1
    words = len(str(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def date_format(value: object) -> str:
    if isinstance(value, str):
        try:
            value = dt.datetime.fromisoformat(value.strip())
        except ValueError:
            return ""
    if not isinstance(value, dt.date):
        return ""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def excerpt(content: object) -> str:
    if not content:
        return ""
    # plain text out; callers escape it for their own markup
    text = html.unescape(strip_tags(str(content)))
    return text[:EXCERPT_LENGTH] + ("..." if len(text) > EXCERPT_LENGTH else "")


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def limit(items: object, count: int) -> list:
    if not _is_sequence(items):
        return []
    return list(items[: max(0, int(count))])


def find(items: object, prop: str, value: object):
    """First item whose ``prop`` (attribute or key) equals ``value``, else None."""
    if not _is_sequence(items):
        return None
    for item in items:
        if isinstance(item, Mapping):
            candidate = item.get(prop, _MISSING)
        else:
            candidate = getattr(item, prop, _MISSING)
        if candidate is not _MISSING and candidate == value:
            return item
    return None


FILTERS = {
    "readingTime": reading_time,
    "dateFormat": date_format,
    "excerpt": excerpt,
    "limit": limit,
    "find": find,
    "relatedPosts": related_posts,
}
