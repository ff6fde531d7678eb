from __future__ import annotations

from typing import Protocol

import httpx

from kvwiki.core.keys import check_storage_key
from kvwiki.errors import StorageError
from kvwiki.logging_setup import log
from kvwiki.settings import OKV_API_BASE, OKV_TIMEOUT_S


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class OpenKeyvalStore:
    """
    HTTP client for an OpenKeyval-style store.

      GET  /<key>           -> raw value, 404 when unset
      POST /store/ key=val  -> {"status": "multiset", ...}
    Deleting is storing the empty value.
    """

    def __init__(
        self,
        api_base: str = OKV_API_BASE,
        *,
        timeout: float = OKV_TIMEOUT_S,
        http: httpx.Client | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.http = http or httpx.Client(base_url=self.api_base, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def get(self, key: str) -> str | None:
        check_storage_key(key)
        log.debug("okv get: key=%s", key)
        try:
            resp = self.http.get(f"/{key}")
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to load {key}: {exc}") from exc
        return resp.text or None

    def set(self, key: str, value: str) -> None:
        check_storage_key(key)
        log.debug("okv set: key=%s bytes=%d", key, len(value.encode("utf-8")))
        self._store(key, value)

    def delete(self, key: str) -> None:
        check_storage_key(key)
        log.debug("okv delete: key=%s", key)
        self._store(key, "")

    def _store(self, key: str, value: str) -> None:
        try:
            resp = self.http.post("/store/", data={key: value})
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StorageError(f"Failed to store {key}: {exc}") from exc

        status = payload.get("status") if isinstance(payload, dict) else None
        if status != "multiset":
            raise StorageError(f"Store rejected {key}: status={status!r}")


class MemoryStore:
    """In-process store for offline use and tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        check_storage_key(key)
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        check_storage_key(key)
        self.data[key] = value

    def delete(self, key: str) -> None:
        check_storage_key(key)
        self.data.pop(key, None)
