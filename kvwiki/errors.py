"""Error kinds raised by kvwiki.

All of them are caught at the editor operation boundary
(load / save / delete) and turned into a transient notice.
"""

from __future__ import annotations


class WikiError(Exception):
    """Base class for kvwiki errors."""


class InvalidKeyError(WikiError, ValueError):
    """Normalization produced an empty key from non-empty input."""


class KeyLengthError(WikiError, ValueError):
    """Composite storage key is empty or too long."""


class StorageError(WikiError):
    """The key-value store reported a failure."""


class RenderError(WikiError):
    """Markdown to HTML conversion failed."""
