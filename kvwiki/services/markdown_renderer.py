from __future__ import annotations

import html

import markdown as md

from kvwiki.core.models import Page
from kvwiki.core.sanitize import sanitize_rendered_html
from kvwiki.core.shorthand import preprocess_links
from kvwiki.core.urls import KeyCodec
from kvwiki.errors import RenderError

MD_EXTENSIONS = ["fenced_code", "tables", "toc"]

BASE_CSS = """
    body { font-family: sans-serif; padding: 16px; line-height: 1.5; }
    code, pre { background: #f5f5f5; }
    pre { padding: 12px; overflow-x: auto; }
    a { text-decoration: none; }
    a:hover { text-decoration: underline; }
"""


class MarkdownRenderer:
    def __init__(self, codec: KeyCodec):
        self.codec = codec

    def render_html(self, page: Page, *, preprocess: bool = True) -> str:
        """
        page -> safe HTML fragment:
          1) shorthand links -> page addresses
          2) markdown -> HTML
          3) sanitize HTML
        """
        text = preprocess_links(page, self.codec) if preprocess else page.content or ""
        try:
            rendered = md.markdown(text, extensions=MD_EXTENSIONS)
        except Exception as exc:
            raise RenderError(f"Markdown rendering failed: {exc}") from exc
        return sanitize_rendered_html(rendered)

    def render_page(self, page: Page, *, css: str = BASE_CSS, preprocess: bool = True) -> str:
        """Full HTML document for the preview."""
        title = html.escape(page.title or "")
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <title>{title}</title>
  <style>{css}</style>
</head>
<body>{self.render_html(page, preprocess=preprocess)}</body>
</html>
"""
