from __future__ import annotations

import argparse
import shutil
import sys
import time
from pathlib import Path

import yaml

from .config import load_config, resolve_env, resolve_passthrough
from .content import load_posts
from .pages import build_index, build_posts, build_rss, build_tags
from .render import copy_passthrough, read_template, write_pygments_css, write_text
from .utils import parse_bool, parse_int
from .views import RELATED_LIMIT, published_posts, tag_list, tag_map

FEED_LIMIT = 20


def prepare_output(output_dir: Path, project_root: Path, clean: bool) -> None:
    """Create the output dir, wiping it first when ``clean`` is set.

    Only directories strictly inside the project root are ever removed.
    """
    target = output_dir.resolve()
    root = project_root.resolve()
    if clean and output_dir.exists():
        if target == root or not target.is_relative_to(root):
            print(f"Refusing to clean {target}: not inside {root}.", file=sys.stderr)
            sys.exit(1)
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)


def build_site(args: argparse.Namespace) -> int:
    """Run one full build and return the number of published posts."""
    input_dir = Path(args.input)
    output_dir = Path(args.output)
    posts_dir = input_dir / "posts"
    template_path = input_dir / args.includes / "base.html"
    project_root = Path.cwd()

    if not input_dir.exists():
        print(f"Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(1)
    if not template_path.exists():
        print(f"Base template not found: {template_path}", file=sys.stderr)
        sys.exit(1)

    prepare_output(output_dir, project_root, args.clean)

    try:
        raw_posts = load_posts(posts_dir, args.toc_depth) if posts_dir.exists() else []
    except yaml.YAMLError as exc:
        print(f"Invalid front matter: {exc}", file=sys.stderr)
        sys.exit(1)

    posts = published_posts(raw_posts)
    tags = tag_list(raw_posts)
    tags_by_name = tag_map(posts)

    copy_passthrough(input_dir, output_dir, args.passthrough)
    write_pygments_css(output_dir, args.pygments_style)

    custom_domain = (args.custom_domain or "").strip()
    if custom_domain:
        write_text(output_dir / "CNAME", f"{custom_domain}\n")
    if args.write_nojekyll:
        write_text(output_dir / ".nojekyll", "")

    site_url = (args.site_url or "").strip()
    if not site_url and custom_domain:
        site_url = f"https://{custom_domain}"
    args.site_url = site_url

    base_template = read_template(template_path)
    build_index(base_template, output_dir, posts, tags, tags_by_name, args)
    build_posts(base_template, output_dir, posts, tags, tags_by_name, args)
    build_tags(base_template, output_dir, tags, tags_by_name, args)
    if args.enable_rss:
        build_rss(output_dir, posts, site_url, args, args.feed_limit)

    drafts = len(raw_posts) - len(posts)
    if drafts:
        print(f"Skipped {drafts} draft post(s).")
    return len(posts)


def main(argv: list[str] | None = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def setting(key: str, default):
        """Config value for ``key`` coerced to the type of ``default``."""
        value = config.get(key)
        if value is None:
            return default
        if isinstance(default, bool):
            return parse_bool(value)
        if isinstance(default, int):
            return parse_int(value, default)
        return str(value)

    parser = argparse.ArgumentParser(description="Tech Learnings blog generator.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--input", default=setting("input", "src"), help="Site source directory.")
    parser.add_argument("--output", default=setting("output", "_site"), help="Output directory for the site.")
    parser.add_argument(
        "--includes",
        default=setting("includes", "_includes"),
        help="Directory inside the input directory holding base.html.",
    )
    parser.add_argument("--site-name", default=setting("site_name", "Tech Learnings"), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=setting("site_description", "Notes on things learned while building software."),
        help="Site description.",
    )
    parser.add_argument(
        "--site-url",
        default=setting("site_url", ""),
        help="Public site URL used for the RSS feed and share links.",
    )
    parser.add_argument(
        "--custom-domain",
        default=setting("custom_domain", ""),
        help="Custom domain to write into CNAME.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=setting("clean", True),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--posts-per-page",
        default=setting("posts_per_page", 8),
        type=int,
        help="Number of posts on the home page before pagination.",
    )
    parser.add_argument(
        "--related-limit",
        default=setting("related_limit", RELATED_LIMIT),
        type=int,
        help="Number of related posts shown under each post.",
    )
    parser.add_argument(
        "--toc-depth",
        default=setting("toc_depth", "2-4"),
        help="Heading depth range for TOC (e.g. 2-4).",
    )
    parser.add_argument(
        "--pygments-style",
        default=setting("pygments_style", "monokai"),
        help="Pygments style used for code highlighting.",
    )
    parser.add_argument(
        "--enable-rss",
        action=argparse.BooleanOptionalAction,
        default=setting("enable_rss", True),
        help="Generate rss.xml.",
    )
    parser.add_argument(
        "--feed-limit",
        default=setting("feed_limit", FEED_LIMIT),
        type=int,
        help="Maximum number of posts in the RSS feed.",
    )
    parser.add_argument(
        "--write-nojekyll",
        action=argparse.BooleanOptionalAction,
        default=setting("write_nojekyll", True),
        help="Write .nojekyll in the output directory.",
    )
    parser.add_argument(
        "--env",
        default=resolve_env(config),
        choices=["development", "production"],
        help="Build environment; production minifies HTML output.",
    )
    args = parser.parse_args(argv)
    args.passthrough = resolve_passthrough(config)
    start = time.perf_counter()
    count = build_site(args)
    elapsed = time.perf_counter() - start
    print(f"Built {count} post(s) in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
