from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from kvwiki.config import WikiConfig
from kvwiki.core.keys import Keys, generate_random_key
from kvwiki.core.models import Page
from kvwiki.core.shorthand import expand_placeholders
from kvwiki.core.urls import KeyCodec
from kvwiki.errors import WikiError
from kvwiki.logging_setup import log
from kvwiki.services.markdown_renderer import MarkdownRenderer
from kvwiki.settings import DEFAULT_PAGE_TITLE
from kvwiki.storage.repo import PageRepository


@dataclass(frozen=True)
class Notice:
    """Transient, auto-dismissing message for the user."""

    level: str  # "info" | "error"
    message: str
    timeout_ms: int


@dataclass(frozen=True)
class OperationResult:
    op: str  # "load" | "save" | "delete" | "restore"
    keys: Keys
    page: Page | None = None
    error: WikiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


NoticeCallback = Callable[[Notice], None]


def welcome_content() -> str:
    sample = generate_random_key(16)
    return (
        "# Welcome to **kvwiki**\n"
        "\n"
        "Every page lives under a short key in a remote key-value store. "
        "Edit this page and link to others with shorthand links: "
        f"[a page like this one]({sample}). "
        "The Help button lists every shorthand form.\n"
        "\n"
        "Pages are public and nothing is guaranteed to be kept. "
        "Do not store anything important here.\n"
        "\n"
        "See the [Markdown syntax][1] for formatting.\n"
        "\n"
        '[1]: https://daringfireball.net/projects/markdown/syntax "Markdown Syntax"\n'
    )


HELP_CONTENT = """\
# Shorthand links

| You write | Links to |
|---|---|
| `[text](page)` | page `page` |
| `[text](notebook/page)` | page `page` of `notebook` |
| `[page]()` | page `page`, labelled with its key |
| `[ref]: page` | reference definition for page `page` |
| `[text](?)`, `[?]()`, `[ref]: ?` | a new random page key, filled in on save |

Keys ignore case and accents; spaces and other symbols become `_`.
Anything with `.` or `:` in it (`http://...`, `notes.html`) is an ordinary link.
"""


class EditorSession:
    """
    State of one editor: which page is open, under which keys.

    Storage and render failures are caught here, logged and reported
    through on_notice; callers get an OperationResult either way.
    """

    def __init__(
        self,
        repo: PageRepository,
        *,
        config: WikiConfig | None = None,
        on_notice: NoticeCallback | None = None,
    ):
        self.config = config or WikiConfig()
        self.repo = repo
        self.codec = KeyCodec(
            domain=self.config.domain,
            notebook_param=self.config.notebook_param,
            page_param=self.config.page_param,
        )
        self.renderer = MarkdownRenderer(self.codec)
        self.on_notice = on_notice

        self.keys = Keys()
        self.page: Page | None = None
        self.backup: Page | None = None
        # keys the backup was taken under; it is only ever restored there
        self.backup_keys: Keys | None = None
        self.edit_mode = False

    # ───────────────────────── navigation ─────────────────────────

    def address(self) -> str:
        return self.codec.keys_url(self.keys)

    def open_keys(self, keys: Keys) -> str:
        """Normalize keys and return the address to navigate to."""
        return self.codec.keys_url(keys.normalized())

    def set_edit_mode(self, state: bool | None = None) -> bool:
        """Set edit mode; toggles when state is None."""
        self.edit_mode = (not self.edit_mode) if state is None else bool(state)
        return self.edit_mode

    # ───────────────────────── operations ─────────────────────────

    def load(self, url: str | None = None) -> OperationResult:
        return self.load_keys(self.codec.decode(url))

    def load_keys(self, keys: Keys) -> OperationResult:
        try:
            keys = keys.normalized()
            page = self.repo.load(keys)
            if self.config.demo_mode and not keys.page_key:
                page.title = "kvwiki"
                page.content = welcome_content()
                self.repo.save(page, keys)
        except WikiError as exc:
            return self._failed("load", keys, exc)

        self.keys = keys
        self.page = page
        self.edit_mode = not page.content
        log.info("Page loaded: address=%s edit_mode=%s", self.address(), self.edit_mode)
        return OperationResult("load", keys, page)

    def save(self, title: str, content: str) -> OperationResult:
        """Commit editor text to the current page, expand it and store it."""
        if self.page is None:
            return OperationResult("save", self.keys)

        self.page.title = title or DEFAULT_PAGE_TITLE
        self.page.content = content
        expand_placeholders(self.page)
        self._keep_backup()
        try:
            self.repo.save(self.page, self.keys)
        except WikiError as exc:
            return self._failed("save", self.keys, exc)
        return OperationResult("save", self.keys, self.page)

    def delete(self) -> OperationResult:
        if self.page is None:
            return OperationResult("delete", self.keys)

        self._keep_backup()
        try:
            self.repo.delete(self.keys)
        except WikiError as exc:
            return self._failed("delete", self.keys, exc)
        self.page = None
        self._notify("info", "Page deleted")
        return OperationResult("delete", self.keys)

    def restore_backup(self) -> OperationResult:
        """
        Store the last backup again under the keys it was taken from
        (undo delete) and make that page the current one.
        """
        if self.backup is None or self.backup_keys is None:
            return OperationResult("restore", self.keys)

        keys = self.backup_keys
        page = self.backup.clone()
        try:
            self.repo.save(page, keys)
        except WikiError as exc:
            return self._failed("restore", keys, exc)
        self.keys = keys
        self.page = page
        self.edit_mode = False
        self._notify("info", "Page restored")
        return OperationResult("restore", keys, page)

    def render(self, page: Page | None = None) -> str | None:
        """Preview HTML for the given (or current) page; None on failure."""
        page = page if page is not None else self.page
        if page is None:
            return None
        try:
            return self.renderer.render_page(page)
        except WikiError as exc:
            log.exception("Render failed: address=%s", self.address())
            self._notify("error", f"Rendering failed: {exc}")
            return None

    def render_help(self) -> str:
        return self.renderer.render_page(Page(title="Help", content=HELP_CONTENT), preprocess=False)

    # ───────────────────────── helpers ─────────────────────────

    def _keep_backup(self) -> None:
        self.backup = self.page.clone()
        self.backup_keys = self.keys

    def _failed(self, op: str, keys: Keys, exc: WikiError) -> OperationResult:
        log.error("%s failed: keys=%s error=%s", op.capitalize(), keys, exc)
        self._notify("error", f"{op.capitalize()} failed: {exc}")
        return OperationResult(op, keys, error=exc)

    def _notify(self, level: str, message: str) -> None:
        if self.on_notice is not None:
            self.on_notice(Notice(level, message, self.config.notice_timeout_ms))
