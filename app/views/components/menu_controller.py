"""MenuController: builds the board's menu bar and wires its actions."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMenuBar

# (menu title, [(action key, label, shortcut) or None for a separator])
MENU_LAYOUT: list[tuple[str, list[tuple[str, str, str] | None]]] = [
    (
        "File",
        [
            ("choose_background", "Open Background Image…", "Ctrl+O"),
            ("import_code", "Import Code…", "Ctrl+I"),
            None,
            ("copy_share", "Copy Share Link", "Ctrl+Shift+C"),
            ("copy_edit", "Copy Edit Link", ""),
            None,
            ("exit", "Exit", "Ctrl+Q"),
        ],
    ),
    ("View", [("toggle_edit", "Edit Mode", "Ctrl+E")]),
    (
        "Log",
        [
            ("open_latest_log", "Open Latest Log", ""),
            None,
            ("open_log_directory", "Open Log Directory", ""),
        ],
    ),
]

CHECKABLE_ACTIONS = frozenset({"toggle_edit"})


class MenuController:
    """Owns the menu bar; actions are addressed by key."""

    def __init__(self, main_window: QMainWindow) -> None:
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Build every menu in `MENU_LAYOUT` and return the actions by key."""
        menubar = QMenuBar(self.window)
        for title, entries in MENU_LAYOUT:
            menu = menubar.addMenu(title)
            for entry in entries:
                if entry is None:
                    menu.addSeparator()
                    continue
                key, label, shortcut = entry
                action = menu.addAction(label)
                if shortcut:
                    action.setShortcut(QKeySequence(shortcut))
                action.setCheckable(key in CHECKABLE_ACTIONS)
                self.actions[key] = action
        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Attach `handlers[key]` to each action's `triggered` signal.

        Exit closes the window unless a handler is supplied for it.
        """
        handlers = {"exit": self.window.close, **handlers}
        for key, handler in handlers.items():
            action = self.actions.get(key)
            if action is not None:
                action.triggered.connect(handler)

    def set_checked(self, key: str, checked: bool) -> None:
        # Mirrors model state, so it must not fire the handler again
        action = self.actions.get(key)
        if action is None or not action.isCheckable():
            return
        previous = action.blockSignals(True)
        action.setChecked(checked)
        action.blockSignals(previous)
