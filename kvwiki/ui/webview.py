from __future__ import annotations

import json

from PySide6.QtCore import QUrl, Signal
from PySide6.QtGui import QDesktopServices
from PySide6.QtWebEngineCore import QWebEnginePage
from PySide6.QtWebEngineWidgets import QWebEngineView

from kvwiki.settings import PREVIEW_BASE_URL

__all__ = ["LinkableWebView"]


class _PageInterceptPage(QWebEnginePage):
    """
    Keeps the preview from navigating away: links to wiki pages are handed
    to the view as a signal, everything else opens in the system browser.
    """

    def __init__(self, view: "LinkableWebView"):
        super().__init__(view)
        self._view = view

    def acceptNavigationRequest(self, url, nav_type, isMainFrame):  # type: ignore[override]
        if nav_type != QWebEnginePage.NavigationType.NavigationTypeLinkClicked:
            return super().acceptNavigationRequest(url, nav_type, isMainFrame)

        if url.host() == self._view.base_url.host():
            if url.hasFragment() and not url.hasQuery():
                # in-page anchor from the toc extension
                frag = json.dumps(url.fragment())
                self.runJavaScript(f"var el = document.getElementById({frag}); if (el) el.scrollIntoView();")
                return False
            self._view.linkClicked.emit(url.toString())
        else:
            QDesktopServices.openUrl(url)
        return False


class LinkableWebView(QWebEngineView):
    linkClicked = Signal(str)

    def __init__(self, base_url: str = PREVIEW_BASE_URL):
        super().__init__()
        self.base_url = QUrl(base_url)
        self.setPage(_PageInterceptPage(self))

    def show_html(self, html: str) -> None:
        # relative page links (index.html?p=...) resolve against base_url
        self.setHtml(html, self.base_url)
