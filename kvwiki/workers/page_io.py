from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from kvwiki.services.session import OperationResult


class PageIOSignals(QObject):
    finished = Signal(int, object)  # req_id, OperationResult
    failed = Signal(int, str)


class PageIOWorker(QRunnable):
    """
    Runs one storage operation (session load/save/delete) off the GUI thread.

    The operation already turns storage errors into an OperationResult;
    `failed` only fires for unexpected exceptions.
    """

    def __init__(self, *, req_id: int, op: Callable[[], OperationResult]):
        super().__init__()
        self.req_id = req_id
        self.op = op
        self.signals = PageIOSignals()

    def run(self):
        try:
            result = self.op()
            self.signals.finished.emit(self.req_id, result)
        except Exception as e:
            self.signals.failed.emit(self.req_id, str(e))
