from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from kvwiki.core.keys import generate_random_key, parse_shorthand
from kvwiki.core.models import Page
from kvwiki.core.urls import KeyCodec
from kvwiki.errors import InvalidKeyError
from kvwiki.logging_setup import log


# Characters that can never be part of a shorthand target. '.' and ':' keep
# ordinary paths and URLs out, '?' is the unexpanded placeholder, '#' an anchor.
_TARGET_EXCLUDED = r".:/()\[\]\"?#"


@dataclass(frozen=True)
class LinkSyntax:
    """
    One of the three Markdown link forms, with the target position marked.

    `template` has a `{target}` slot; the text around it is captured as
    `head`/`tail` and always written back verbatim.
    `target_is_label`: the target doubles as the link text ([target]()),
    so a resolved address goes into the empty parentheses instead.
    `excluded`: extra characters a shorthand target may not contain here.
    """

    name: str
    template: str
    target_is_label: bool = False
    excluded: str = r"\s"

    def compile(self, target_pattern: str) -> re.Pattern[str]:
        return re.compile(
            self.template.format(target=f"(?P<target>{target_pattern})"),
            re.MULTILINE,
        )

    def shorthand_pattern(self) -> str:
        chars = _TARGET_EXCLUDED + self.excluded
        return f"[^{chars}]+/?[^{chars}]*"


# [text](target "title")
EXPLICIT = LinkSyntax(
    name="explicit",
    template=r"(?P<head>\[[^\[\]\n]+\]\(){target}(?P<tail>[ \t]*(?:\"[^\"\n]*\")?\))",
)

# [target]()
IMPLICIT = LinkSyntax(
    name="implicit",
    template=r"(?P<head>\[){target}(?P<tail>\]\(\))",
    target_is_label=True,
    excluded=r"\n",
)

# [ref]: target "title"
REFERENTIAL = LinkSyntax(
    name="referential",
    template=r"^(?P<head>\[[^\[\]\n]+\]:[ \t]*){target}(?P<tail>[ \t]*(?:[\"'(].*[\"')])?[ \t]*\r?)$",
    excluded=r"\s'",
)

LINK_SYNTAXES = (EXPLICIT, IMPLICIT, REFERENTIAL)

PLACEHOLDER = r"\?"


class LinkTargetLocator:
    """Finds link targets of one syntax that match a target pattern."""

    def __init__(self, syntax: LinkSyntax, target_pattern: str):
        self.syntax = syntax
        self.regex = syntax.compile(target_pattern)

    def substitute(self, text: str, transform: Callable[[str], str]) -> str:
        """Replace each matched target in place with transform(target)."""
        def repl(m: re.Match) -> str:
            return m.group("head") + transform(m.group("target")) + m.group("tail")

        return self.regex.sub(repl, text)

    def link(self, text: str, to_url: Callable[[str], str | None]) -> str:
        """
        Point each matched link at to_url(target).
        A None url leaves the match untouched.
        """
        def repl(m: re.Match) -> str:
            target = m.group("target")
            url = to_url(target)
            if url is None:
                return m.group(0)
            if self.syntax.target_is_label:
                return f"{m.group('head')}{target}]({url})"
            return m.group("head") + url + m.group("tail")

        return self.regex.sub(repl, text)


_PLACEHOLDER_LOCATORS = tuple(LinkTargetLocator(s, PLACEHOLDER) for s in LINK_SYNTAXES)
_SHORTHAND_LOCATORS = tuple(LinkTargetLocator(s, s.shorthand_pattern()) for s in LINK_SYNTAXES)


def expand_text(text: str, *, key_factory: Callable[[], str] = generate_random_key) -> str:
    """Replace every `?` link target with its own fresh key."""
    for locator in _PLACEHOLDER_LOCATORS:
        text = locator.substitute(text, lambda _target: key_factory())
    return text


def expand_placeholders(page: Page, *, key_factory: Callable[[], str] = generate_random_key) -> Page:
    """
    Fill in `?` placeholders of page.content with random keys.

    Mutates and returns the page. Must run once per save, before the page
    is stored: expanded content has no placeholders left, so running it
    again changes nothing.
    """
    page.content = expand_text(page.content or "", key_factory=key_factory)
    return page


def preprocess_text(text: str, codec: KeyCodec) -> str:
    """Rewrite shorthand link targets into page addresses."""
    def to_url(target: str) -> str | None:
        try:
            return codec.keys_url(parse_shorthand(target))
        except InvalidKeyError:
            log.debug("Shorthand left as is (no valid key): %r", target)
            return None

    for locator in _SHORTHAND_LOCATORS:
        text = locator.link(text, to_url)
    return text


def preprocess_links(page: Page, codec: KeyCodec) -> str:
    """Markdown ready for rendering. The page itself is not modified."""
    return preprocess_text(page.content or "", codec)
