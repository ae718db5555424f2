from __future__ import annotations

from PySide6.QtWidgets import QWidget

from spritetab.model.settings import SettingsStore


class BasePanel(QWidget):
    """
    A page of the window's right-hand tab stack ("Details", "Sprites").

    The settings store is passed in by the window rather than looked up, so
    every panel of one window shares the same instance.
    """
    def __init__(self, store: SettingsStore, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.store = store
