from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import minify_html


def transform_html(content: str, output_path: Optional[Union[str, Path]], production: bool) -> str:
    """Minify rendered HTML for production builds; other outputs pass through untouched."""
    if not production or not output_path or not str(output_path).endswith(".html"):
        return content
    return minify_html.minify(
        content,
        keep_comments=False,
        minify_css=True,
        minify_js=True,
    )
