from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Page:
    """
    A wiki page as stored in the key-value store.

    A notebook is a page with is_notebook set; notebook_pages lists the
    pages it contains, in order.
    """

    title: str = ""
    content: str = ""
    is_notebook: bool = False
    notebook_pages: list[Any] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "isNotebook": self.is_notebook,
            "notebookPages": copy.deepcopy(self.notebook_pages),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Page":
        """Tolerant of missing fields: absent ones take the empty defaults."""
        pages = record.get("notebookPages") or []
        return cls(
            title=str(record.get("title") or ""),
            content=str(record.get("content") or ""),
            is_notebook=bool(record.get("isNotebook", False)),
            notebook_pages=copy.deepcopy(list(pages)),
        )

    def clone(self) -> "Page":
        return copy.deepcopy(self)
