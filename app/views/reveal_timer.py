"""Qt implementation of the deferred-reveal scheduler."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer
from loguru import logger


class QtRevealScheduler(QObject):
    """Single-shot `QTimer`s with cancellable integer handles.

    Timers are children of the scheduler, so tearing the scheduler down
    stops anything still pending.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timers: dict[int, QTimer] = {}
        self._next_handle = 0

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        handle = self._next_handle
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(handle, callback))
        self._timers[handle] = timer
        timer.start(max(0, int(delay_ms)))
        return handle

    def cancel(self, handle: object) -> None:
        timer = self._timers.pop(handle, None)  # type: ignore[arg-type]
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def cancel_all(self) -> None:
        for handle in list(self._timers):
            self.cancel(handle)

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def _fire(self, handle: int, callback: Callable[[], None]) -> None:
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.deleteLater()
        try:
            callback()
        except Exception as ex:  # pragma: no cover - GUI callback
            logger.error("Scheduled callback failed: {}", ex)
