# kvwiki/core/keys.py

from __future__ import annotations

import math
import re
import secrets
from dataclasses import dataclass

from kvwiki.core.diacritics import strip_diacritics
from kvwiki.errors import InvalidKeyError, KeyLengthError
from kvwiki.settings import RANDOM_KEY_LENGTH, STORAGE_KEY_MAX_LENGTH, STORAGE_KEY_PREFIX


PUNCTUATION_RE = re.compile(r"[.,!?;:'\"]")
INVALID_KEY_CHARS_RE = re.compile(r"[^a-z0-9+~_-]")

# [notebook]/[page], with '.' and ':' never part of a key
SHORTHAND_RE = re.compile(r"([^.:/]*)/?([^.:/]*)")

HEX_DIGITS = "0123456789abcdef"


@dataclass(frozen=True)
class Keys:
    """Notebook/page key pair. Either part may be empty."""

    notebook_key: str = ""
    page_key: str = ""

    def normalized(self) -> "Keys":
        return Keys(normalize_key(self.notebook_key), normalize_key(self.page_key))


def normalize_key(text: str) -> str:
    """
    Convert arbitrary text into a key that is safe for addresses and storage.

    Result alphabet is [a-z0-9+~_-]. Blank input gives "".
    Raises InvalidKeyError when non-blank input leaves nothing behind
    (e.g. "?!").
    """
    if text is None or not str(text).strip():
        return ""

    # 1. Case-insensitive keys
    key = str(text).lower().strip()

    # 2. Accented letters -> base letters; decomposition can yield capitals ("ℍ" -> "H")
    key = strip_diacritics(key).lower()

    # 3. Drop punctuation, then replace everything else that is not allowed
    key = PUNCTUATION_RE.sub("", key)
    key = INVALID_KEY_CHARS_RE.sub("_", key)

    if not key:
        raise InvalidKeyError(f"Key cannot be made valid: {text!r}")
    return key


def generate_random_key(length: float = RANDOM_KEY_LENGTH) -> str:
    """Random lowercase hex key. No uniqueness check."""
    n = int(math.floor(abs(length) + 0.5))
    return "".join(secrets.choice(HEX_DIGITS) for _ in range(n))


def parse_shorthand(shorthand: str) -> Keys:
    """
    Split a shorthand link target into keys.

      a/b -> notebook=a, page=b
      c   -> notebook="", page=c
      d/  -> notebook=d, page=""
      /e  -> notebook="", page=e

    A bare token is always the page key. Anything that does not fit the
    grammar (a/b/c, x.y) yields empty keys instead of raising.
    """
    cleaned = (shorthand or "").strip().lower()
    m = SHORTHAND_RE.fullmatch(cleaned)
    if m is None:
        return Keys()
    if "/" not in m.group(0):
        return Keys("", m.group(1))
    return Keys(m.group(1), m.group(2))


def build_storage_key(
    page_key: str,
    notebook_key: str = "",
    *,
    prefix: str = STORAGE_KEY_PREFIX,
) -> str:
    """
    Composite store key: prefix + notebook key + page key, no separator.

    "nb" + "page" and "nbp" + "age" collide; the store cannot tell them apart.
    """
    key = prefix + normalize_key(notebook_key) + normalize_key(page_key)
    check_storage_key(key)
    return key


def storage_key_for(keys: Keys, *, prefix: str = STORAGE_KEY_PREFIX) -> str:
    return build_storage_key(keys.page_key, keys.notebook_key, prefix=prefix)


def check_storage_key(key: str) -> None:
    if len(key) <= 0:
        raise KeyLengthError("Storage key is empty")
    if len(key) > STORAGE_KEY_MAX_LENGTH:
        raise KeyLengthError(
            f"Storage key is {len(key)} characters long (max {STORAGE_KEY_MAX_LENGTH})"
        )
