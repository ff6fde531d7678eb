from .diacritics import strip_diacritics
from .keys import (
    Keys,
    build_storage_key,
    check_storage_key,
    generate_random_key,
    normalize_key,
    parse_shorthand,
    storage_key_for,
)
from .models import Page
from .urls import KeyCodec
from .shorthand import (
    LinkSyntax,
    LinkTargetLocator,
    expand_placeholders,
    expand_text,
    preprocess_links,
    preprocess_text,
)

__all__ = ["strip_diacritics",
           "Keys",
           "build_storage_key",
           "check_storage_key",
           "generate_random_key",
           "normalize_key",
           "parse_shorthand",
           "storage_key_for",
           "Page",
           "KeyCodec",
           "LinkSyntax",
           "LinkTargetLocator",
           "expand_placeholders",
           "expand_text",
           "preprocess_links",
           "preprocess_text",
           ]
