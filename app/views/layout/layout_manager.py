"""LayoutManager: board canvas beside a collapsible edit sidebar."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QHBoxLayout, QMainWindow, QSplitter, QWidget

from app.views.constants import SIDEBAR_WIDTH_PX


class LayoutManager:
    """Builds the central splitter and sizes the window on first show."""

    STRETCH = (8, 2)  # canvas, sidebar
    COLLAPSED_SIDEBAR_WIDTH = 40
    WINDOW_SIZE_RATIO = 0.7

    def __init__(self, main_window: QMainWindow) -> None:
        self.window = main_window
        self.splitter: QSplitter | None = None
        self._expanded_width = SIDEBAR_WIDTH_PX

    def setup_main_layout(self, canvas: QWidget, sidebar: QWidget) -> QWidget:
        """Place `canvas` and `sidebar` in a horizontal splitter.

        Returns:
            The widget to install as the window's central widget.
        """
        central = QWidget(self.window)
        box = QHBoxLayout(central)
        box.setContentsMargins(0, 0, 0, 0)

        splitter = QSplitter(Qt.Horizontal, central)
        for index, pane in enumerate((canvas, sidebar)):
            splitter.addWidget(pane)
            splitter.setStretchFactor(index, self.STRETCH[index])
        # The board must never disappear behind the sidebar
        splitter.setCollapsible(0, False)
        box.addWidget(splitter)

        self.splitter = splitter
        return central

    def connect_splitter_signals(self, refit_callback: Callable) -> None:
        if self.splitter is not None:
            self.splitter.splitterMoved.connect(lambda *_: refit_callback())

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        """Shrink the sidebar to its toggle strip, or give back its last width."""
        if self.splitter is None:
            return
        sizes = self.splitter.sizes()
        if collapsed and sizes[1] > self.COLLAPSED_SIDEBAR_WIDTH:
            self._expanded_width = sizes[1]
        side = self.COLLAPSED_SIDEBAR_WIDTH if collapsed else self._expanded_width
        total = max(1, sum(sizes))
        self.splitter.setSizes([max(1, total - side), side])

    def setup_initial_window_size(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        available = screen.availableGeometry()
        self.window.resize(
            int(available.width() * self.WINDOW_SIZE_RATIO),
            int(available.height() * self.WINDOW_SIZE_RATIO),
        )
