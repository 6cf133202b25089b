from __future__ import annotations

import datetime as dt
import html
import math
from pathlib import Path

from .content import slugify
from .filters import date_format, excerpt, limit, reading_time
from .minify import transform_html
from .models import Post
from .render import render_template, strip_tags, write_text
from .ui import COPY_LABEL, DEFAULT_THEME, theme_label
from .utils import join_url, rfc822_date
from .views import related_posts


def tag_url(root: str, tag: str) -> str:
    return f"{root}/tags/{slugify(tag)}.html"


def write_page(path: Path, html_doc: str, args: object) -> None:
    production = getattr(args, "env", "") == "production"
    write_text(path, transform_html(html_doc, path, production))


def render_page(
    base_template: str,
    args: object,
    root: str,
    title: str,
    content: str,
    sidebar: str,
    extra_head: str = "",
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        root=root,
        content=content,
        sidebar=sidebar,
        site_name=html.escape(args.site_name),
        site_description=html.escape(args.site_description),
        year=str(dt.datetime.now().year),
        extra_head=extra_head,
        theme_default=DEFAULT_THEME,
        theme_toggle_label=theme_label(DEFAULT_THEME),
    )


def build_tag_chips(tags: tuple[str, ...], root: str) -> str:
    return " ".join(f'<a class="chip" href="{tag_url(root, tag)}">{html.escape(tag)}</a>' for tag in tags)


def build_tag_list(tags: list[str], tags_by_name: dict, root: str) -> str:
    items = []
    for tag in tags:
        count = len(tags_by_name.get(tag, []))
        items.append(
            f'<li><a href="{tag_url(root, tag)}">{html.escape(tag)}</a>'
            f'<span class="count">{count}</span></li>'
        )
    return "\n".join(items) if items else "<li>No tags yet.</li>"


def build_sidebar(tags: list[str], tags_by_name: dict, root: str, toc_html: str = "") -> str:
    panels = []
    if toc_html and "<li" in toc_html:
        panels.append(
            '<div class="panel">'
            "<h3>Contents</h3>"
            f"{toc_html}"
            "</div>"
        )
    panels.append(
        '<div class="panel">'
        "<h3>Tags</h3>"
        f'<ul class="tag-list">{build_tag_list(tags, tags_by_name, root)}</ul>'
        "</div>"
    )
    return "".join(panels)


def build_post_meta(post: Post, root: str) -> str:
    return (
        '<div class="post-meta"><div class="post-meta-left">'
        f'<time class="post-date" datetime="{post.date.date().isoformat()}">{date_format(post.date)}</time>'
        f'<span class="post-reading-time">{reading_time(strip_tags(post.content))} min read</span>'
        "</div>"
        f'<div class="post-tags">{build_tag_chips(post.tags, root)}</div></div>'
    )


def build_post_cards(posts: list[Post], root: str) -> str:
    cards = []
    for idx, post in enumerate(posts):
        delay = min(idx * 0.05, 0.3)
        url = f"{root}/{post.url}"
        summary = post.description or excerpt(post.content)
        cards.append(
            f'<article class="post-card" style="animation-delay: {delay:.2f}s">'
            f"{build_post_meta(post, root)}"
            f'<h2 class="post-title"><a href="{url}">{html.escape(post.title)}</a></h2>'
            f'<p class="post-summary">{html.escape(summary)}</p>'
            f'<a class="post-more" href="{url}">Read more</a>'
            "</article>"
        )
    return "\n".join(cards)


def page_url(page: int) -> str:
    return "index.html" if page == 1 else f"page-{page}.html"


def build_pagination(page: int, total_pages: int) -> str:
    if total_pages <= 1:
        return ""

    def step(target: int, label: str, rel: str) -> str:
        if 1 <= target <= total_pages:
            return f'<a class="page-link" rel="{rel}" href="./{page_url(target)}">{label}</a>'
        return f'<span class="page-link is-disabled">{label}</span>'

    numbers = "".join(
        f'<span class="page-number is-active" aria-current="page">{num}</span>'
        if num == page
        else f'<a class="page-number" href="./{page_url(num)}">{num}</a>'
        for num in range(1, total_pages + 1)
    )
    return (
        '<nav class="pagination" aria-label="Pages">'
        f'{step(page - 1, "Newer", "prev")}'
        f'<div class="page-numbers">{numbers}</div>'
        f'{step(page + 1, "Older", "next")}'
        "</nav>"
    )


def build_index(
    base_template: str,
    output_dir: Path,
    posts: list[Post],
    tags: list[str],
    tags_by_name: dict,
    args: object,
) -> int:
    root = "."
    sidebar = build_sidebar(tags, tags_by_name, root)
    per_page = max(1, int(getattr(args, "posts_per_page", 8)))
    total_pages = max(1, math.ceil(len(posts) / per_page))

    for page in range(1, total_pages + 1):
        start = (page - 1) * per_page
        page_posts = posts[start : start + per_page]
        content = (
            '<div class="section-head">'
            "<h2>Latest posts</h2>"
            f"<p>{html.escape(args.site_description)}</p>"
            "</div>"
            f'<div class="post-grid">{build_post_cards(page_posts, root)}</div>'
            f"{build_pagination(page, total_pages)}"
        )
        page_title = f"{args.site_name} | Home"
        if page > 1:
            page_title = f"{args.site_name} | Page {page}"
        html_doc = render_page(base_template, args, root, page_title, content, sidebar)
        write_page(output_dir / page_url(page), html_doc, args)

    return total_pages


def build_related(related: list[Post], root: str) -> str:
    if not related:
        return ""
    rows = []
    for item in related:
        rows.append(
            f'<li><a href="{root}/{item.url}">{html.escape(item.title)}</a>'
            f'<time class="related-date">{date_format(item.date)}</time></li>'
        )
    return (
        '<section class="related-posts">'
        "<h2>Related posts</h2>"
        f'<ul class="related-list">{"".join(rows)}</ul>'
        "</section>"
    )


def build_share(post: Post, site_url: str) -> str:
    link = join_url(site_url, post.url) if site_url else post.url
    return (
        '<div class="share">'
        f'<button id="copyLinkBtn" class="share-button" type="button" data-url="{html.escape(link)}">'
        f'<span id="copyLinkText">{COPY_LABEL}</span></button>'
        "</div>"
    )


def build_posts(
    base_template: str,
    output_dir: Path,
    posts: list[Post],
    tags: list[str],
    tags_by_name: dict,
    args: object,
) -> None:
    root = ".."
    related_limit = max(0, int(getattr(args, "related_limit", 3)))
    site_url = (getattr(args, "site_url", "") or "").strip()
    extra_head = (
        f'<script src="{root}/assets/js/reading-progress.js" defer></script>'
        f'<script src="{root}/assets/js/share.js" defer></script>'
    )
    for post in posts:
        sidebar = build_sidebar(tags, tags_by_name, root, post.toc)
        related = related_posts(posts, post, related_limit)
        content = (
            '<div id="reading-progress-bar" class="reading-progress"></div>'
            '<article class="post">'
            f"{build_post_meta(post, root)}"
            f'<h1 class="post-title">{html.escape(post.title)}</h1>'
            f'<div class="post-body">{post.content}</div>'
            f"{build_share(post, site_url)}"
            f'<div class="post-footer"><a href="{root}/index.html">Back to home</a></div>'
            "</article>"
            f"{build_related(related, root)}"
        )
        html_doc = render_page(
            base_template, args, root, f"{post.title} | {args.site_name}", content, sidebar, extra_head
        )
        write_page(output_dir / post.url, html_doc, args)


def build_tags(
    base_template: str,
    output_dir: Path,
    tags: list[str],
    tags_by_name: dict,
    args: object,
) -> None:
    root = ".."
    sidebar = build_sidebar(tags, tags_by_name, root)
    content = (
        '<div class="section-head">'
        "<h2>Tags</h2>"
        "<p>Every topic covered so far.</p>"
        "</div>"
        f'<ul class="tag-index">{build_tag_list(tags, tags_by_name, root)}</ul>'
    )
    html_doc = render_page(base_template, args, root, f"Tags | {args.site_name}", content, sidebar)
    write_page(output_dir / "tags" / "index.html", html_doc, args)

    for tag in tags:
        content = (
            '<div class="section-head">'
            f"<h2>{html.escape(tag)}</h2>"
            "<p>Posts tagged with this topic.</p>"
            "</div>"
            f'<div class="post-grid">{build_post_cards(tags_by_name.get(tag, []), root)}</div>'
        )
        html_doc = render_page(base_template, args, root, f"{tag} | {args.site_name}", content, sidebar)
        write_page(output_dir / "tags" / f"{slugify(tag)}.html", html_doc, args)


def build_rss(output_dir: Path, posts: list[Post], site_url: str, args: object, feed_limit: int) -> None:
    if not site_url:
        return
    site_url = site_url.rstrip("/")
    items = []
    for post in limit(posts, feed_limit):
        link = join_url(site_url, post.url)
        categories = "".join(f"<category>{html.escape(tag)}</category>" for tag in post.tags)
        items.append(
            "\n".join(
                [
                    "<item>",
                    f"<title>{html.escape(post.title)}</title>",
                    f"<link>{link}</link>",
                    f"<guid>{link}</guid>",
                    f"<pubDate>{rfc822_date(post.date)}</pubDate>",
                    f"{categories}",
                    f"<description>{html.escape(post.description or excerpt(post.content))}</description>",
                    "</item>",
                ]
            )
        )
    last_build = rfc822_date(posts[0].date) if posts else rfc822_date(dt.datetime.now())
    rss = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "<channel>",
            f"<title>{html.escape(args.site_name)}</title>",
            f"<link>{site_url}/</link>",
            f"<description>{html.escape(args.site_description)}</description>",
            f"<lastBuildDate>{last_build}</lastBuildDate>",
            "\n".join(items),
            "</channel>",
            "</rss>",
        ]
    )
    write_text(output_dir / "rss.xml", rss)
