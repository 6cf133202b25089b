import shutil
from pathlib import Path

import pytest

from techblog.cli import main

SAMPLE_SITE = Path(__file__).resolve().parents[1] / "src"

BASE_TEMPLATE = (
    "<!DOCTYPE html>\n<html class=\"{{theme_default}}\">\n<head><title>{{title}}</title>{{extra_head}}</head>\n"
    "<body>\n  <!-- layout -->\n  <main>{{content}}</main>\n  <aside>{{sidebar}}</aside>\n</body>\n</html>\n"
)


@pytest.fixture
def site(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SITE_ENV", raising=False)
    src = tmp_path / "src"
    (src / "_includes").mkdir(parents=True)
    (src / "posts").mkdir()
    (src / "assets" / "js").mkdir(parents=True)
    (src / "_includes" / "base.html").write_text(BASE_TEMPLATE, encoding="utf-8")
    (src / "assets" / "js" / "share.js").write_text("// share", encoding="utf-8")
    posts = {
        "alpha.md": "---\ntitle: Alpha\ndate: 2024-01-10\ntags: [x, y]\n---\nAlpha body",
        "beta.md": "---\ntitle: Beta\ndate: 2024-01-05\ntags: [y]\n---\nBeta body",
        "gamma.md": "---\ntitle: Gamma\ndate: 2024-01-20\n---\nGamma body",
        "hidden.md": "---\ntitle: Hidden\ndate: 2024-02-01\ntags: [secret]\ndraft: true\n---\nHidden",
    }
    for name, text in posts.items():
        (src / "posts" / name).write_text(text, encoding="utf-8")
    return tmp_path


def _build(*extra):
    main(["--config", "missing.toml", "--site-url", "https://blog.example", *extra])


def test_build_writes_pages(site, capsys):
    _build("--related-limit", "2")
    out = site / "_site"
    assert (out / "index.html").exists()
    assert (out / "posts" / "alpha.html").exists()
    assert not (out / "posts" / "hidden.html").exists()
    assert (out / "tags" / "index.html").exists()
    assert (out / "tags" / "x.html").exists()
    assert not (out / "tags" / "secret.html").exists()
    assert (out / "assets" / "js" / "share.js").exists()
    assert (out / "assets" / "styles" / "pygments.css").exists()
    assert (out / ".nojekyll").exists()
    assert "Built 3 post(s)" in capsys.readouterr().out


def test_build_index_lists_newest_first(site):
    _build()
    index = (site / "_site" / "index.html").read_text(encoding="utf-8")
    assert index.index("Gamma") < index.index("Alpha") < index.index("Beta")
    assert "January 20, 2024" in index
    assert "Hidden" not in index


def test_build_post_page_related_posts(site):
    _build("--related-limit", "2")
    page = (site / "_site" / "posts" / "alpha.html").read_text(encoding="utf-8")
    related = page[page.index('class="related-posts"') :]
    assert related.index("Beta") < related.index("Gamma")
    assert "Alpha" not in related
    assert 'data-url="https://blog.example/posts/alpha.html"' in page


def test_build_rss_feed(site):
    _build()
    rss = (site / "_site" / "rss.xml").read_text(encoding="utf-8")
    assert "<link>https://blog.example/posts/gamma.html</link>" in rss
    assert "Hidden" not in rss


def test_build_minifies_in_production(site, monkeypatch):
    monkeypatch.setenv("SITE_ENV", "production")
    _build()
    index = (site / "_site" / "index.html").read_text(encoding="utf-8")
    assert "<!-- layout -->" not in index


def test_build_keeps_comments_in_development(site):
    _build()
    index = (site / "_site" / "index.html").read_text(encoding="utf-8")
    assert "<!-- layout -->" in index


def test_build_missing_template_exits(site):
    (site / "src" / "_includes" / "base.html").unlink()
    with pytest.raises(SystemExit) as excinfo:
        _build()
    assert excinfo.value.code == 1


def test_build_escapes_summaries_once(site):
    (site / "src" / "posts" / "cartoon.md").write_text(
        "---\ntitle: Cartoon\ndate: 2024-01-01\n---\nTom & Jerry <3", encoding="utf-8"
    )
    _build()
    index = (site / "_site" / "index.html").read_text(encoding="utf-8")
    assert 'post-summary">Tom &amp; Jerry &lt;3</p>' in index
    assert "&amp;amp;" not in index
    rss = (site / "_site" / "rss.xml").read_text(encoding="utf-8")
    assert "<description>Tom &amp; Jerry &lt;3</description>" in rss


def test_sample_site_ships_page_scripts(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SITE_ENV", raising=False)
    shutil.copytree(SAMPLE_SITE, tmp_path / "src")
    _build()
    out = tmp_path / "_site"
    for script in ("share.js", "reading-progress.js", "theme-toggle.js"):
        assert (out / "assets" / "js" / script).exists()
    assert (out / "robots.txt").exists()
    index = (out / "index.html").read_text(encoding="utf-8")
    assert "assets/js/theme-toggle.js" in index
    post = (out / "posts" / "hello-world.html").read_text(encoding="utf-8")
    assert "../assets/js/share.js" in post
    assert "../assets/js/reading-progress.js" in post
