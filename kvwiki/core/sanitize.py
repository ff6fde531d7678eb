from __future__ import annotations

import bleach

ALLOWED_TAGS = [
    "a", "p", "br", "hr",
    "strong", "em", "code", "pre", "blockquote",
    "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td",
]
ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "th": ["align"], "td": ["align"],
    # anchors from the markdown 'toc' extension
    "h1": ["id"], "h2": ["id"], "h3": ["id"],
    "h4": ["id"], "h5": ["id"], "h6": ["id"],
}
# Page links are relative (index.html?p=...), which bleach always keeps.
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def sanitize_rendered_html(rendered_html: str) -> str:
    """Strip anything from rendered Markdown that could run in the preview."""
    return bleach.clean(
        rendered_html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
