"""Behaviour behind the theme toggle, reading progress bar and copy-link button.

The page scripts only wire these rules to the document; the rules themselves
live here so they can be checked without a browser.
"""
from __future__ import annotations

from typing import Callable, Optional, Protocol

THEME_KEY = "theme"
DEFAULT_THEME = "dark"
COPY_LABEL = "Copy Link"
COPIED_LABEL = "Copied!"
FAILED_LABEL = "Failed"


class ThemeStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class ScrollSource(Protocol):
    scroll_top: float
    scroll_height: float
    client_height: float


class ClipboardSink(Protocol):
    def write_text(self, text: str) -> None: ...


class MemoryThemeStore:
    def __init__(self, initial: Optional[dict] = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


def current_theme(store: ThemeStore) -> str:
    return store.get(THEME_KEY) or DEFAULT_THEME


def theme_label(theme: str) -> str:
    return "Switch to light mode" if theme == "dark" else "Switch to dark mode"


def apply_theme(store: ThemeStore, theme: str) -> str:
    """Persist ``theme`` and return the toggle button's aria-label."""
    store.set(THEME_KEY, theme)
    return theme_label(theme)


def toggle_theme(store: ThemeStore) -> str:
    new_theme = "light" if current_theme(store) == "dark" else "dark"
    apply_theme(store, new_theme)
    return new_theme


def scroll_progress(source: ScrollSource) -> float:
    height = source.scroll_height - source.client_height
    if height <= 0:
        return 0.0
    return max(0.0, min(100.0, source.scroll_top / height * 100))


class ProgressThrottle:
    """Coalesce scroll events so at most one update runs per animation frame."""

    def __init__(self, request_frame: Callable[[Callable[[], None]], None], update: Callable[[], None]):
        self.request_frame = request_frame
        self.update = update
        self.ticking = False

    def on_scroll(self) -> None:
        if self.ticking:
            return
        self.ticking = True
        self.request_frame(self._run)

    def _run(self) -> None:
        self.update()
        self.ticking = False


class CopyLinkButton:
    def __init__(self, url: str, clipboard: ClipboardSink):
        self.url = url
        self.clipboard = clipboard
        self.label = COPY_LABEL
        self.highlighted = False

    def click(self) -> bool:
        try:
            self.clipboard.write_text(self.url)
        except Exception:
            self.label = FAILED_LABEL
            self.highlighted = False
            return False
        self.label = COPIED_LABEL
        self.highlighted = True
        return True

    def reset(self) -> None:
        self.label = COPY_LABEL
        self.highlighted = False
