"""MainWindow: hosts the board canvas and the edit sidebar.

All board state lives in `BoardVM`; the window wires widget signals to it and
keeps the widgets in sync after each change.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QTimer, Signal
from PySide6.QtWidgets import QApplication, QMainWindow
from loguru import logger

from app.viewmodels.board_vm import BoardVM
from app.viewmodels.door_vm import looks_like_markup
from app.views.board_canvas import BoardCanvas
from app.views.components.menu_controller import MenuController
from app.views.constants import CODE_REFRESH_DEBOUNCE_MS
from app.views.handlers.dialog_handler import DialogHandler
from app.views.image_tasks import ImageTaskRunner
from app.views.layout.layout_manager import LayoutManager
from app.views.sidebar import EditSidebar
from core.services.unlock_service import ClickOutcome
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main application window."""

    # Emitted from worker threads by ImageTaskRunner
    backgroundLoaded = Signal(int, str, object)  # token, path, LoadedImage | None

    def __init__(
        self,
        vm: BoardVM,
        image_service: Any | None = None,
        scheduler: Any | None = None,
        log_dir: str | None = None,
    ) -> None:
        """Initialize MainWindow.

        Args:
            vm: Board view-model, already hydrated
            image_service: Service decoding background images
            scheduler: Reveal scheduler to tear down on close
            log_dir: Log directory for the Log menu (None = default)
        """
        super().__init__()
        self._vm = vm
        self._img = image_service
        self._scheduler = scheduler
        self._log_dir = log_dir

        self._setup_components()
        self._setup_ui()
        self._connect_signals()
        self._apply_mode()
        self._load_initial_background()
        self.status_reporter.show_status("Ready")

    def _setup_components(self) -> None:
        self.canvas = BoardCanvas(self._vm)
        self.sidebar = EditSidebar()
        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)
        self.dialog_handler = DialogHandler(self)
        self.status_reporter = StatusReporterImpl(self)
        self._runner = ImageTaskRunner(service=self._img, receiver=self)

        self._code_timer = QTimer(self)
        self._code_timer.setSingleShot(True)
        self._code_timer.setInterval(CODE_REFRESH_DEBOUNCE_MS)
        self._code_timer.timeout.connect(self._refresh_codes)

    def _setup_ui(self) -> None:
        central = self.layout_manager.setup_main_layout(self.canvas, self.sidebar)
        self.setCentralWidget(central)
        self.layout_manager.connect_splitter_signals(self.canvas.update)
        self.layout_manager.setup_initial_window_size()
        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        handlers = {
            "choose_background": self.on_choose_background,
            "import_code": self.on_import_code,
            "copy_share": lambda *_: self.copy_code(False),
            "copy_edit": lambda *_: self.copy_code(True),
            "toggle_edit": self.on_toggle_edit,
            "open_latest_log": lambda *_: self._open_log(latest=True),
            "open_log_directory": lambda *_: self._open_log(latest=False),
            "exit": self.close,
        }
        self.menu_controller.connect_actions(handlers)

        self.backgroundLoaded.connect(self._on_background_loaded)
        self._vm.set_reveal_listener(self._on_reveal)
        self.dialog_handler.content_dialog().finished.connect(lambda *_: self._vm.close_reveal())

        self.canvas.doorClicked.connect(self._on_door_clicked)
        self.canvas.dragFinished.connect(self._on_drag_finished)

        self.sidebar.nameChanged.connect(self._on_name_changed)
        self.sidebar.backgroundRequested.connect(self.on_choose_background)
        self.sidebar.copyRequested.connect(self.copy_code)
        self.sidebar.importRequested.connect(self._on_sidebar_import)
        self.sidebar.doorChanged.connect(self._on_door_changed)
        self.sidebar.selectionClosed.connect(self._on_selection_closed)
        self.sidebar.collapseToggled.connect(self.layout_manager.set_sidebar_collapsed)

    # Mode and sidebar sync
    def _apply_mode(self) -> None:
        edit = self._vm.edit_mode
        self.sidebar.setVisible(edit)
        self.menu_controller.set_checked("toggle_edit", edit)
        self._update_title()
        if edit:
            self._sync_sidebar()
        self.canvas.update()

    def _update_title(self) -> None:
        suffix = " (edit)" if self._vm.edit_mode else ""
        self.setWindowTitle(f"{self._vm.name or 'Advent Board'}{suffix}")

    def _sync_sidebar(self) -> None:
        self.sidebar.set_calendar(self._vm.name)
        selected = self._vm.selected_id
        self.sidebar.show_door(self._vm.registry.get(selected) if selected is not None else None)
        self._refresh_codes()

    def _schedule_code_refresh(self) -> None:
        if self._vm.edit_mode:
            self._code_timer.start()

    def _refresh_codes(self) -> None:
        if not self._vm.edit_mode:
            return
        self.sidebar.set_codes(self._vm.export_code(False), self._vm.export_code(True))

    # Menu actions
    def on_toggle_edit(self, checked: bool) -> None:
        self._vm.edit_mode = bool(checked)
        if not checked:
            self._vm.select_door(None)
        logger.info("Edit mode {}", "on" if checked else "off")
        self._apply_mode()

    def on_choose_background(self) -> None:
        path = self.dialog_handler.choose_background_file()
        if path:
            self._request_background(path)

    def on_import_code(self) -> None:
        answer = self.dialog_handler.ask_import_code(edit_default=True)
        if answer is None:
            return
        code, edit = answer
        self._import(code, edit)

    def copy_code(self, edit: bool) -> None:
        path = self._vm.export_code(edit)
        QApplication.clipboard().setText(path)
        self.status_reporter.show_status("Edit link copied" if edit else "Share link copied")

    def _open_log(self, latest: bool) -> None:
        opened = open_latest_log(self._log_dir) if latest else open_log_directory(self._log_dir)
        if not opened:
            self.status_reporter.show_status("No log available")

    # Import
    def _on_sidebar_import(self, text: str) -> None:
        if self._import(text, True):
            self.sidebar.clear_import()

    def _import(self, text: str, edit: bool) -> bool:
        if not self._vm.handle_import_code(text, edit=edit):
            self.status_reporter.show_status("Invalid code, board unchanged", 5000)
            return False
        self.dialog_handler.close_content()
        self.canvas.reset_doors()
        self.canvas.set_background_image(None)
        self._load_initial_background()
        self._apply_mode()
        self.status_reporter.show_status(f"Imported {self._vm.door_count} doors")
        return True

    # Background
    def _load_initial_background(self) -> None:
        if self._vm.background:
            self._request_background(self._vm.background)

    def _request_background(self, path: str) -> None:
        token = self._vm.request_background()
        logger.debug("Background load requested: {} (token {})", path, token)
        self._runner.request_background(path, token)

    def _on_background_loaded(self, token: int, path: str, result: Any) -> None:
        if result is None:
            self._vm.background_failed(token, path)
            self.status_reporter.show_status(f"Could not load image: {path}", 5000)
            return
        if not self._vm.apply_background(token, result.info):
            return
        self.canvas.set_background_image(result.image)
        # Aspect may have changed; refit against the current canvas size
        self._vm.set_available_size(max(1, self.canvas.width()), max(1, self.canvas.height()))
        self.canvas.update()
        self._schedule_code_refresh()

    # Board interaction
    def _on_door_clicked(self, door_id: int, outcome: Any) -> None:
        if outcome is ClickOutcome.SELECTED:
            self.sidebar.show_door(self._vm.registry.get(door_id))
        elif outcome is ClickOutcome.LOCKED:
            self.status_reporter.show_status(f"Door {door_id} is still locked")

    def _on_reveal(self, content: str) -> None:
        self.dialog_handler.show_content(content, looks_like_markup(content))

    def _on_drag_finished(self, door_id: int) -> None:
        self._schedule_code_refresh()

    def _on_door_changed(self, door_id: int, changes: dict) -> None:
        try:
            changed = self._vm.update_door(door_id, **changes)
        except ValueError as ex:
            logger.error("Door {} update rejected: {}", door_id, ex)
            return
        if changed:
            self.canvas.update()
            self._schedule_code_refresh()

    def _on_name_changed(self, name: str) -> None:
        self._vm.set_name(name)
        self.sidebar.set_calendar(self._vm.name)
        self._update_title()
        self._schedule_code_refresh()

    def _on_selection_closed(self) -> None:
        self._vm.select_door(None)
        self.sidebar.show_door(None)
        self.canvas.update()

    def closeEvent(self, event) -> None:
        """Cancel pending reveals and timers before the window goes away."""
        self._vm.dispose()
        self._code_timer.stop()
        if self._scheduler is not None:
            self._scheduler.cancel_all()
        logger.info("Main window closed")
        event.accept()


class StatusReporterImpl:
    """Status bar wrapper used by the window's handlers."""

    def __init__(self, main_window: QMainWindow):
        self.window = main_window

    def show_status(self, message: str, timeout: int = 3000) -> None:
        """Show status message in status bar."""
        self.window.statusBar().showMessage(message, timeout)
