"""App entrypoint.

    kvwiki                     open the last page (or the index)
    kvwiki "index.html?p=abc"  open an address
    kvwiki --offline           keep pages in memory instead of the remote store
"""

from __future__ import annotations

import argparse
from dataclasses import replace

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from kvwiki.config import load_config
from kvwiki.logging_setup import SESSION_ID, install_global_exception_hooks, log, setup_logging
from kvwiki.services.session import EditorSession
from kvwiki.settings import APP_NAME
from kvwiki.storage import MemoryStore, OpenKeyvalStore, PageRepository
from kvwiki.ui.main_window import WikiWindow


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog=APP_NAME, description="Markdown wiki over a key-value store")
    p.add_argument("address", nargs="?", default=None, help="Page address to open, e.g. index.html?p=home")
    p.add_argument("--offline", action="store_true", help="Keep pages in memory (nothing is uploaded)")
    p.add_argument("--demo", action="store_true", help="Reset the index page to the welcome page on load")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    install_global_exception_hooks()

    app = QApplication([])
    app.setApplicationName(APP_NAME)
    settings = QSettings(APP_NAME, APP_NAME)
    config = load_config(settings)
    if args.demo:
        config = replace(config, demo_mode=True)

    store = MemoryStore() if args.offline else OpenKeyvalStore(config.okv_api_base)
    repo = PageRepository(store, prefix=config.storage_prefix)
    session = EditorSession(repo, config=config)

    win = WikiWindow(session, settings=settings)
    win.resize(900, 700)
    win.show()
    win.start(args.address)
    log.info("Application started, SID=%s offline=%s", SESSION_ID, args.offline)
    code = app.exec()
    if isinstance(store, OpenKeyvalStore):
        store.close()
    return code


if __name__ == "__main__":
    raise SystemExit(main())
