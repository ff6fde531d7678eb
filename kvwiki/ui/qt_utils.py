from __future__ import annotations

from contextlib import contextmanager


@contextmanager
def blocked_signals(obj):
    """
    Temporarily silence an object's Qt signals and always turn them back on.
    """
    if obj is None:
        yield
        return
    try:
        obj.blockSignals(True)
        yield
    finally:
        try:
            obj.blockSignals(False)
        except RuntimeError:
            # the C++ object may already be gone
            pass
