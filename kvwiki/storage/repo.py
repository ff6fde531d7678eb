from __future__ import annotations

import json
from dataclasses import dataclass

from kvwiki.core.keys import Keys, storage_key_for
from kvwiki.core.models import Page
from kvwiki.errors import StorageError
from kvwiki.logging_setup import log
from kvwiki.settings import STORAGE_KEY_PREFIX
from kvwiki.storage.okv import KeyValueStore


@dataclass(frozen=True)
class PageRepository:
    """Pages by keys, serialized as flat JSON records."""

    store: KeyValueStore
    prefix: str = STORAGE_KEY_PREFIX

    def storage_key(self, keys: Keys) -> str:
        return storage_key_for(keys, prefix=self.prefix)

    def load(self, keys: Keys) -> Page:
        """Stored page, or a fresh empty one for an unused key."""
        key = self.storage_key(keys)
        raw = self.store.get(key)
        if not raw:
            log.info("Page not found, starting empty: key=%s", key)
            return Page()
        try:
            record = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Stored value for {key} is not a page record: {exc}") from exc
        if record is None:
            return Page()
        if not isinstance(record, dict):
            raise StorageError(f"Stored value for {key} is not a page record")
        return Page.from_record(record)

    def save(self, page: Page, keys: Keys) -> None:
        key = self.storage_key(keys)
        self.store.set(key, json.dumps(page.to_record(), ensure_ascii=False))
        log.info("Page saved: key=%s title=%s", key, page.title)

    def delete(self, keys: Keys) -> None:
        key = self.storage_key(keys)
        self.store.delete(key)
        log.info("Page deleted: key=%s", key)
