from .okv import KeyValueStore, MemoryStore, OpenKeyvalStore
from .repo import PageRepository

__all__ = ["KeyValueStore",
           "MemoryStore",
           "OpenKeyvalStore",
           "PageRepository",
           ]
