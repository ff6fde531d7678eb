from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote_plus

from kvwiki.core.keys import Keys, normalize_key
from kvwiki.settings import DOMAIN, NOTEBOOK_KEY_PARAM, PAGE_KEY_PARAM


@dataclass(frozen=True)
class KeyCodec:
    """
    Keys <-> page address.

    Only the page key goes into generated addresses. The notebook key is
    still normalized (so an invalid one fails the same way) but dropped:
    there is a single notebook per deployment.
    """

    domain: str = DOMAIN
    notebook_param: str = NOTEBOOK_KEY_PARAM
    page_param: str = PAGE_KEY_PARAM

    def page_url(self, page_key: str, notebook_key: str = "") -> str:
        normalize_key(notebook_key)
        page_key = normalize_key(page_key)
        url = f"{self.domain}?"
        if page_key:
            url += f"{self.page_param}={quote(page_key, safe='')}"
        return url

    def keys_url(self, keys: Keys) -> str:
        return self.page_url(keys.page_key, keys.notebook_key)

    def decode(self, url: str | None = None) -> Keys:
        """Read both keys from an address. Missing parameters give ""."""
        return Keys(
            notebook_key=self._param(self.notebook_param, url or ""),
            page_key=self._param(self.page_param, url or ""),
        )

    @staticmethod
    def _param(name: str, url: str) -> str:
        m = re.search(r"[?&]" + re.escape(name) + r"=([^&#]*)", url)
        if m is None:
            return ""
        return unquote_plus(m.group(1))
