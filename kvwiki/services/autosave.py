from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer

from kvwiki.settings import AUTOSAVE_DELAY_MS


class AutosaveTimer(QObject):
    """
    Idle autosave debounce.

    poke() on every keystroke restarts the countdown, so only the last
    request within the delay fires. flush() saves right away (focus loss,
    Ctrl+S, Save button); cancel() drops a pending save.
    """

    def __init__(self, save: Callable[[], None], *, delay_ms: int = AUTOSAVE_DELAY_MS, parent: QObject | None = None):
        super().__init__(parent)
        self._save = save
        self.timer = QTimer(self)
        self.timer.setInterval(delay_ms)
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._fire)

    @property
    def pending(self) -> bool:
        return self.timer.isActive()

    def poke(self) -> None:
        self.timer.start()

    def cancel(self) -> None:
        self.timer.stop()

    def flush(self) -> None:
        self.timer.stop()
        self._fire()

    def _fire(self) -> None:
        self._save()
