from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QSettings

from kvwiki import settings as defaults


@dataclass(frozen=True)
class SettingsKeys:
    UI_GEOMETRY: str = "ui/geometry"
    LAST_ADDRESS: str = "nav/last_address"
    DOMAIN: str = "wiki/domain"
    NOTEBOOK_PARAM: str = "wiki/notebook_param"
    PAGE_PARAM: str = "wiki/page_param"
    DEMO_MODE: str = "wiki/demo_mode"
    STORAGE_PREFIX: str = "storage/prefix"
    OKV_API_BASE: str = "storage/okv_api_base"
    AUTOSAVE_DELAY_MS: str = "editor/autosave_delay_ms"
    NOTICE_TIMEOUT_MS: str = "editor/notice_timeout_ms"


@dataclass(frozen=True)
class WikiConfig:
    domain: str = defaults.DOMAIN
    notebook_param: str = defaults.NOTEBOOK_KEY_PARAM
    page_param: str = defaults.PAGE_KEY_PARAM
    demo_mode: bool = defaults.DEMO_MODE
    storage_prefix: str = defaults.STORAGE_KEY_PREFIX
    okv_api_base: str = defaults.OKV_API_BASE
    autosave_delay_ms: int = defaults.AUTOSAVE_DELAY_MS
    notice_timeout_ms: int = defaults.NOTICE_TIMEOUT_MS


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except Exception:
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    # INI backends hand booleans back as "true"/"false" strings
    val = settings.value(key, default)
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        low = val.strip().lower()
        if low in ("1", "true", "yes", "on"):
            return True
        if low in ("0", "false", "no", "off"):
            return False
    return default


def normalize_param(name: str, default: str) -> str:
    name = (name or "").strip()
    return name if name.isidentifier() else default


def load_config(settings: QSettings | None = None) -> WikiConfig:
    if settings is None:
        return WikiConfig()

    k = SettingsKeys()
    base = WikiConfig()
    delay = get_int(settings, k.AUTOSAVE_DELAY_MS, base.autosave_delay_ms)
    notice = get_int(settings, k.NOTICE_TIMEOUT_MS, base.notice_timeout_ms)
    return WikiConfig(
        domain=get_str(settings, k.DOMAIN, base.domain).strip() or base.domain,
        notebook_param=normalize_param(get_str(settings, k.NOTEBOOK_PARAM, base.notebook_param), base.notebook_param),
        page_param=normalize_param(get_str(settings, k.PAGE_PARAM, base.page_param), base.page_param),
        demo_mode=get_bool(settings, k.DEMO_MODE, base.demo_mode),
        storage_prefix=get_str(settings, k.STORAGE_PREFIX, base.storage_prefix),
        okv_api_base=get_str(settings, k.OKV_API_BASE, base.okv_api_base).strip() or base.okv_api_base,
        autosave_delay_ms=delay if delay >= 0 else base.autosave_delay_ms,
        notice_timeout_ms=notice if notice >= 0 else base.notice_timeout_ms,
    )


def save_config(settings: QSettings, config: WikiConfig) -> None:
    k = SettingsKeys()
    values = {
        k.DOMAIN: config.domain,
        k.NOTEBOOK_PARAM: config.notebook_param,
        k.PAGE_PARAM: config.page_param,
        k.DEMO_MODE: config.demo_mode,
        k.STORAGE_PREFIX: config.storage_prefix,
        k.OKV_API_BASE: config.okv_api_base,
        k.AUTOSAVE_DELAY_MS: config.autosave_delay_ms,
        k.NOTICE_TIMEOUT_MS: config.notice_timeout_ms,
    }
    for key, value in values.items():
        safe_set_setting(settings, key, value)
    settings.sync()


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort QSettings write that never takes the UI down."""
    try:
        settings.setValue(key, value)
    except Exception:
        pass
