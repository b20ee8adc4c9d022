from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger


class _BackgroundTask(QRunnable):
    """QRunnable for decoding a background image off the UI thread.

    Emits `receiver.backgroundLoaded(token, path, result)` upon completion,
    where `result` is a `LoadedImage` or None. The receiver is expected to own
    a Qt `Signal(int, str, object)` named `backgroundLoaded`.
    """

    def __init__(self, *, path: str, token: int, service: Any, receiver: QObject) -> None:
        super().__init__()
        self._path = path
        self._token = token
        self._service = service
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._service.load_background(self._path)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Background task failed: {}", ex)
            result = None
        try:
            # Queued back to the receiver's (UI) thread by the signal connection
            self._receiver.backgroundLoaded.emit(self._token, self._path, result)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Background result dropped: {}", ex)


class ImageTaskRunner:
    """Dispatches background decode tasks to the global thread pool."""

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_background(self, path: str, token: int) -> None:
        """Decode `path`; the result is reported back with `token`."""
        if self._service is None:
            return
        task = _BackgroundTask(
            path=path, token=token, service=self._service, receiver=self._receiver
        )
        self._pool.start(task)
