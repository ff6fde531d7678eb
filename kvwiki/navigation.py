from __future__ import annotations

from collections import deque
from typing import Literal

from kvwiki.core.keys import Keys

Step = Literal["open", "back", "forward"]


class NavigationHistory:
    """
    Back/forward history of visited pages.

    Entries are normalized Keys, so every address of one page is a single
    entry. Nothing is recorded up front: the window loads a page (a target
    from back_target()/forward_target(), or a new one) and only a
    successful load is committed with visit().
    """

    def __init__(self, *, history_limit: int | None = None) -> None:
        if history_limit is not None and history_limit < 0:
            raise ValueError("history_limit must be >= 0 or None")
        self._back: deque[Keys] = deque(maxlen=history_limit)
        self._forward: deque[Keys] = deque(maxlen=history_limit)
        self._current: Keys | None = None

    @property
    def current(self) -> Keys | None:
        return self._current

    @property
    def can_back(self) -> bool:
        return bool(self._back)

    @property
    def can_forward(self) -> bool:
        return bool(self._forward)

    def back_target(self) -> Keys | None:
        return self._back[-1] if self._back else None

    def forward_target(self) -> Keys | None:
        return self._forward[-1] if self._forward else None

    def visit(self, keys: Keys, step: Step = "open") -> None:
        """
        Record that `keys` is now on screen.

        A "back"/"forward" step moves along the history when `keys` is the
        matching target; anything else counts as a new visit, which drops
        the forward stack. Revisiting the current page changes nothing.
        """
        current = self._current
        if step == "back" and self.back_target() == keys:
            self._back.pop()
            if current is not None:
                self._forward.append(current)
        elif step == "forward" and self.forward_target() == keys:
            self._forward.pop()
            if current is not None:
                self._back.append(current)
        elif keys != current:
            if current is not None:
                self._back.append(current)
            self._forward.clear()
        self._current = keys

    def clear(self) -> None:
        self._back.clear()
        self._forward.clear()
        self._current = None
