from __future__ import annotations

import re
import shutil
import sys
from pathlib import Path

from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

IMG_SRC_RE = re.compile(r'(<img\b[^>]*?\bsrc=")(?![a-z][a-z0-9+.-]*:|[#/.])([^"]+)"', re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>")
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def fix_relative_img_src(html_text: str, root: str) -> str:
    """Point bare relative image paths at ``root``; absolute and ``./``/``../`` paths are kept."""
    return IMG_SRC_RE.sub(lambda m: f'{m.group(1)}{root}/{m.group(2)}"', html_text)


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def render_template(template: str, **context: str) -> str:
    # one pass over the template only, so placeholders inside inserted values stay literal
    return PLACEHOLDER_RE.sub(lambda m: context.get(m.group(1), m.group(0)), template)


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_passthrough(input_dir: Path, output_dir: Path, paths: list[str]) -> list[Path]:
    copied = []
    for entry in paths:
        source = input_dir / entry
        if not source.exists():
            print(f"Passthrough path not found, skipping: {source}", file=sys.stderr)
            continue
        dest = output_dir / source.relative_to(input_dir)
        if source.is_dir():
            if dest.exists():
                shutil.rmtree(dest)
            shutil.copytree(source, dest)
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        copied.append(dest)
    return copied


def write_pygments_css(output_dir: Path, style: str) -> Path:
    try:
        formatter = HtmlFormatter(style=style)
    except ClassNotFound:
        print(f"Unknown Pygments style {style!r}, using default.", file=sys.stderr)
        formatter = HtmlFormatter()
    path = output_dir / "assets" / "styles" / "pygments.css"
    write_text(path, formatter.get_style_defs(".codehilite"))
    return path
