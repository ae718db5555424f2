"""
Layout controls shown above the sprite grid.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QSlider, QCheckBox

from spritetab.config import MIN_COLUMNS, MAX_COLUMNS
from spritetab.model.settings import Settings, SettingsStore

TOGGLES = [
    ("Timestamps", "show_timestamps"),
    ("Compact", "compact"),
    ("Auto-Scroll", "auto_scroll"),
]


class SpriteControlsBar(QWidget):
    """Column slider plus toggles. Every change is saved to the store at once."""

    def __init__(self, store: SettingsStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        settings = store.load()

        self.setObjectName("spriteControls")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet("""
            #spriteControls {
                background: rgba(30, 30, 30, 242);
                border-bottom: 1px solid #444;
                border-radius: 0px 0px 5px 5px;
            }
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(15)

        layout.addWidget(QLabel("Size:", self))
        self.slider = QSlider(Qt.Orientation.Horizontal, self)
        self.slider.setRange(MIN_COLUMNS, MAX_COLUMNS)
        self.slider.setValue(settings.columns)
        self.slider.setMaximumWidth(200)
        self.slider.valueChanged.connect(self.on_columns_changed)
        layout.addWidget(self.slider, 1)

        self.checks: dict[str, QCheckBox] = {}
        for label, key in TOGGLES:
            check = QCheckBox(label, self)
            check.setChecked(getattr(settings, key))
            check.toggled.connect(lambda checked, k=key: self.on_toggled(k, checked))
            layout.addWidget(check)
            self.checks[key] = check

    def on_columns_changed(self, value: int) -> None:
        self.store.save(columns=value)

    def on_toggled(self, key: str, checked: bool) -> None:
        self.store.save({key: checked})

    def sync_from(self, settings: Settings) -> None:
        """Updates the widgets without saving again (store changed elsewhere)."""
        self.slider.blockSignals(True)
        self.slider.setValue(settings.columns)
        self.slider.blockSignals(False)
        for key, check in self.checks.items():
            check.blockSignals(True)
            check.setChecked(getattr(settings, key))
            check.blockSignals(False)
