import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kvwiki.core.models import Page
from kvwiki.core.urls import KeyCodec
from kvwiki.errors import RenderError
from kvwiki.services import markdown_renderer
from kvwiki.services.markdown_renderer import MarkdownRenderer


renderer = MarkdownRenderer(KeyCodec())


def test_shorthand_becomes_page_link():
    html = renderer.render_html(Page(content="[text](home)"))
    assert '<a href="index.html?p=home">text</a>' in html


def test_external_link_kept():
    html = renderer.render_html(Page(content="[web](https://example.com/a)"))
    assert 'href="https://example.com/a"' in html


def test_scripts_removed():
    html = renderer.render_html(Page(content="hi <script>alert(1)</script>\n\n[x](javascript:alert(1))"))
    assert "<script" not in html
    assert "javascript:" not in html


def test_tables_and_headings():
    html = renderer.render_html(Page(content="# Top\n\n| a | b |\n|---|---|\n| 1 | 2 |\n"))
    assert '<h1 id="top">Top</h1>' in html
    assert "<table>" in html


def test_without_preprocess():
    html = renderer.render_html(Page(content="`[text](home)`"), preprocess=False)
    assert "[text](home)" in html


def test_render_page_document():
    doc = renderer.render_page(Page(title="<b>T</b>", content="body"))
    assert "<title>&lt;b&gt;T&lt;/b&gt;</title>" in doc
    assert "<p>body</p>" in doc
    assert "<style>" in doc


def test_markdown_failure_is_render_error(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("parser crashed")

    monkeypatch.setattr(markdown_renderer.md, "markdown", boom)
    with pytest.raises(RenderError):
        renderer.render_html(Page(content="x"))
