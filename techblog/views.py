from __future__ import annotations

from typing import Optional, Sequence

from .models import Post

RELATED_LIMIT = 3


def published_posts(posts: Sequence[Post]) -> list[Post]:
    """Non-draft posts, newest first. Posts with equal dates keep their input order."""
    visible = [post for post in posts if not post.draft]
    return sorted(visible, key=lambda post: post.date, reverse=True)


def tag_list(posts: Sequence[Post]) -> list[str]:
    """Distinct tags of non-draft posts in ordinal (code point) order."""
    tags = set()
    for post in posts:
        if post.draft:
            continue
        tags.update(post.tags)
    return sorted(tags)


def tag_map(posts: Sequence[Post]) -> dict[str, list[Post]]:
    mapping: dict[str, list[Post]] = {}
    for post in posts:
        for tag in post.tags:
            mapping.setdefault(tag, []).append(post)
    return mapping


def related_posts(
    collection: Sequence[Post], current_post: Optional[Post], limit: int = RELATED_LIMIT
) -> list[Post]:
    """Rank other posts by shared tags, then recency, and backfill with recent posts.

    The backfill is ordered by date, so an unsorted collection still fills with the
    newest posts first. For a collection already sorted newest first this is the
    collection order.
    """
    limit = max(0, int(limit))
    current_tags = getattr(current_post, "tags", None)
    if current_post is None or current_tags is None:
        return list(collection[:limit])

    others = [post for post in collection if post.url != current_post.url]
    if not current_tags:
        return others[:limit]

    wanted = set(current_tags)
    scored = []
    for post in others:
        match_count = len(wanted.intersection(post.tags or ()))
        if match_count:
            scored.append((match_count, post))
    scored.sort(key=lambda item: (item[0], item[1].date), reverse=True)
    related = [post for _, post in scored[:limit]]

    if len(related) < limit:
        chosen = {post.url for post in related}
        fill = [post for post in others if post.url not in chosen]
        fill.sort(key=lambda post: post.date, reverse=True)
        related.extend(fill[: limit - len(related)])
    return related
