from __future__ import annotations

import datetime as dt
import re
from pathlib import Path

import markdown
import yaml

from .models import Post, make_post, post_url
from .render import fix_relative_img_src
from .utils import naive_utc, parse_bool

NON_WORD_RE = re.compile(r"[^\w]+")
FRONT_MATTER_RE = re.compile(
    r"^---[ \t]*\r?\n(?P<meta>.*?)^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]


def slugify(text: str) -> str:
    slug = NON_WORD_RE.sub("-", text.lower()).replace("_", "-").strip("-")
    return slug or "post"


def parse_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        value = str(value).strip()
        if value.startswith("[") and value.endswith("]"):
            value = value[1:-1]
        items = [item.strip().strip("'\"") for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split a leading ``---`` YAML block from the Markdown body."""
    match = FRONT_MATTER_RE.match(text.lstrip("\ufeff"))
    if not match:
        return {}, text.lstrip("\ufeff")
    meta = yaml.safe_load(match.group("meta"))
    if not isinstance(meta, dict):
        meta = {}
    return {str(key).strip().lower(): value for key, value in meta.items()}, match.group("body")


def extract_title(meta: dict, body: str) -> tuple[str, str]:
    if meta.get("title"):
        return str(meta["title"]), body
    stripped = body.lstrip()
    if stripped.startswith("# "):
        heading, _, rest = stripped.partition("\n")
        return heading[2:].strip() or "Untitled", rest.lstrip()
    return "Untitled", body


def parse_date(meta: dict, file_path: Path) -> dt.datetime:
    value = meta.get("date")
    if isinstance(value, str) and value.strip():
        try:
            value = dt.datetime.fromisoformat(value.strip())
        except ValueError:
            value = None
    if isinstance(value, dt.datetime):
        return naive_utc(value)
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    modified = dt.datetime.fromtimestamp(file_path.stat().st_mtime, dt.timezone.utc)
    return naive_utc(modified)


def render_markdown(body: str, toc_depth: str = "2-4") -> tuple[str, str]:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={
            "toc": {"toc_depth": toc_depth},
            "codehilite": {"guess_lang": False},
        },
    )
    html_content = md.convert(body)
    return html_content, md.toc


def load_post(md_file: Path, toc_depth: str = "2-4") -> Post:
    meta, body = parse_front_matter(md_file.read_text(encoding="utf-8"))
    title, body = extract_title(meta, body)
    explicit_slug = str(meta.get("slug") or "").strip()
    slug = slugify(explicit_slug) if explicit_slug else slugify(md_file.stem)
    draft = parse_bool(meta.get("draft"))
    html_content = ""
    toc_html = ""
    if not draft:
        html_content, toc_html = render_markdown(body, toc_depth)
        html_content = fix_relative_img_src(html_content, "..")
    return make_post(
        post_url(slug),
        parse_date(meta, md_file),
        tags=parse_list(meta.get("tags")),
        draft=draft,
        title=title,
        slug=slug,
        content=html_content,
        description=str(meta.get("description") or meta.get("summary") or ""),
        toc=toc_html,
        source=md_file.as_posix(),
    )


def load_posts(posts_dir: Path, toc_depth: str = "2-4") -> list[Post]:
    """Load every ``*.md`` file directly under ``posts_dir``, drafts included."""
    posts = []
    used_slugs: set[str] = set()
    for md_file in sorted(posts_dir.glob("*.md"), key=lambda p: p.as_posix()):
        post = load_post(md_file, toc_depth)
        if post.slug in used_slugs:
            counter = 2
            while f"{post.slug}-{counter}" in used_slugs:
                counter += 1
            post.slug = f"{post.slug}-{counter}"
            post.url = post_url(post.slug)
        used_slugs.add(post.slug)
        posts.append(post)
    return posts
