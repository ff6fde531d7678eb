from __future__ import annotations
from pathlib import Path

APP_NAME = "kvwiki"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

# Storage
STORAGE_KEY_PREFIX = "5310okvviki"
STORAGE_KEY_MAX_LENGTH = 128
OKV_API_BASE = "https://api.openkeyval.org"
OKV_TIMEOUT_S = 10.0

# Addresses
DOMAIN = "index.html"
NOTEBOOK_KEY_PARAM = "n"
PAGE_KEY_PARAM = "p"
# Base URL the preview is loaded under, so relative page links resolve to it.
PREVIEW_BASE_URL = "http://kvwiki.local/"

# Editor
AUTOSAVE_DELAY_MS = 1000
NOTICE_TIMEOUT_MS = 3000
DEFAULT_PAGE_TITLE = "Untitled Page"
RANDOM_KEY_LENGTH = 8
DEMO_MODE = False
