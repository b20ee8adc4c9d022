"""DialogHandler: Coordinates dialog operations and user interactions."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import QDialog, QFileDialog, QWidget
from loguru import logger

from app.views.dialogs.content_dialog import ContentDialog
from app.views.dialogs.import_code_dialog import ImportCodeDialog
from infrastructure.image_service import IMAGE_FILE_FILTER


class DialogHandler:
    """Coordinates the main window's dialogs.

    This class encapsulates:
    - Background image file selection
    - The import-code prompt
    - The single, reused content dialog
    """

    def __init__(self, parent_widget: QWidget) -> None:
        """Initialize with the parent widget for dialogs.

        Args:
            parent_widget: Parent widget for dialogs
        """
        self.parent = parent_widget
        self._content_dialog: ContentDialog | None = None
        self._last_dir = str(Path.home())

    def choose_background_file(self) -> str | None:
        """Ask for a background image; returns the chosen path or None."""
        path, _ = QFileDialog.getOpenFileName(
            self.parent, "Choose Background Image", self._last_dir, IMAGE_FILE_FILTER
        )
        if not path:
            return None
        self._last_dir = str(Path(path).parent)
        return path

    def ask_import_code(self, edit_default: bool = True) -> tuple[str, bool] | None:
        """Prompt for a code; returns (code, open_in_edit_mode) or None when cancelled."""
        dlg = ImportCodeDialog(self.parent, edit_default=edit_default)
        if dlg.exec() != QDialog.Accepted:
            return None
        return dlg.values()

    def content_dialog(self) -> ContentDialog:
        if self._content_dialog is None:
            self._content_dialog = ContentDialog(self.parent)
        return self._content_dialog

    def show_content(self, content: str, markup: bool) -> ContentDialog:
        """Show `content` in the modeless content dialog, replacing what it shows."""
        dlg = self.content_dialog()
        dlg.set_content(content, markup)
        dlg.show()
        dlg.raise_()
        dlg.activateWindow()
        logger.debug("Content dialog shown ({} chars)", len(content))
        return dlg

    def close_content(self) -> None:
        if self._content_dialog is not None and self._content_dialog.isVisible():
            self._content_dialog.close()
