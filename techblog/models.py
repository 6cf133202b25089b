from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass(eq=False)
class Post:
    url: str
    date: dt.datetime
    tags: tuple[str, ...] = ()
    draft: bool = False
    title: str = "Untitled"
    slug: str = ""
    content: str = ""
    description: str = ""
    toc: str = ""
    source: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Post):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)


def post_url(slug: str) -> str:
    return f"posts/{slug}.html"


def make_post(
    url: str,
    date: dt.datetime,
    tags: object = None,
    draft: bool = False,
    **extra: object,
) -> Post:
    """Build a Post, normalizing tags to a tuple with duplicates dropped."""
    if tags is None:
        tag_tuple: tuple[str, ...] = ()
    elif isinstance(tags, str):
        tag_tuple = (tags,)
    else:
        tag_tuple = tuple(dict.fromkeys(str(tag) for tag in tags))
    return Post(url=url, date=date, tags=tag_tuple, draft=bool(draft), **extra)
