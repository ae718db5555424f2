from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QRectF, QSize, Signal
from PySide6.QtGui import QPainter, QPainterPath, QPen, QColor, QPixmap
from PySide6.QtWidgets import QFrame, QLabel, QSizePolicy, QWidget

from spritetab.config import TILE_ASPECT_RATIO
from spritetab.model.timeline import format_timestamp

BORDER_COLOR = QColor("#333333")
HOVER_COLOR = QColor("#ffffff")
ACTIVE_COLOR = QColor("#00BFFF")
BORDER_RADIUS = 4.0
ACTIVE_WIDTH = 2


class SpriteTile(QFrame):
    """
    One cell of the sprite grid.

    Paints its crop of the shared sheet pixmap at a fixed 16:9 aspect, with an
    optional border and an inset highlight when active. Created once per sheet
    load; settings changes only flip its visual attributes.
    """
    clicked = Signal(float)

    def __init__(
        self,
        index: int,
        time_seconds: float,
        sheet: QPixmap,
        source: QRectF,
        compact: bool = False,
        show_timestamp: bool = True,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.index = index
        self.time_seconds = time_seconds
        self._sheet = sheet
        self._source = source

        self.is_active = False
        self.compact = compact
        self._hovered = False

        policy = QSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        policy.setHeightForWidth(True)
        self.setSizePolicy(policy)
        self.setMinimumSize(32, 18)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setToolTip(format_timestamp(time_seconds))

        self.timestamp_label = QLabel(format_timestamp(time_seconds), self)
        self.timestamp_label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.timestamp_label.setStyleSheet(
            "QLabel { background: rgba(0, 0, 0, 178); color: #fff; font-size: 11px; padding: 1px 4px; }"
        )
        self.timestamp_label.adjustSize()
        self.timestamp_label.setVisible(show_timestamp)

    # --- VISUAL STATE ---

    @property
    def border_visible(self) -> bool:
        return not self.compact

    @property
    def border_radius(self) -> float:
        return 0.0 if self.compact else BORDER_RADIUS

    @property
    def timestamp_visible(self) -> bool:
        return not self.timestamp_label.isHidden()

    def set_compact(self, compact: bool) -> None:
        if compact != self.compact:
            self.compact = compact
            self.update()

    def set_timestamp_visible(self, visible: bool) -> None:
        self.timestamp_label.setVisible(visible)

    def set_active(self, active: bool) -> None:
        if active != self.is_active:
            self.is_active = active
            # Draw the highlight above neighbouring tiles
            if active:
                self.raise_()
            self.update()

    # --- LAYOUT ---

    def hasHeightForWidth(self) -> bool:
        return True

    def heightForWidth(self, width: int) -> int:
        return int(round(width * TILE_ASPECT_RATIO))

    def sizeHint(self) -> QSize:
        return QSize(160, self.heightForWidth(160))

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        lbl = self.timestamp_label
        lbl.move(self.width() - lbl.width(), self.height() - lbl.height())

    # --- EVENTS ---

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = QRectF(self.rect())

        clip = QPainterPath()
        clip.addRoundedRect(rect, self.border_radius, self.border_radius)
        painter.setClipPath(clip)

        if not self._sheet.isNull() and not self._source.isEmpty():
            painter.drawPixmap(rect, self._sheet, self._source)

        if self.border_visible:
            color = HOVER_COLOR if self._hovered else BORDER_COLOR
            painter.setPen(QPen(color, 1))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRoundedRect(rect.adjusted(0.5, 0.5, -0.5, -0.5), self.border_radius, self.border_radius)

        if self.is_active:
            inset = ACTIVE_WIDTH / 2
            painter.setPen(QPen(ACTIVE_COLOR, ACTIVE_WIDTH))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(rect.adjusted(inset, inset, -inset, -inset))

        painter.end()

    def enterEvent(self, event) -> None:
        self._hovered = True
        if not self.compact:
            self.update()
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:
        self._hovered = False
        if not self.compact:
            self.update()
        super().leaveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.rect().contains(event.position().toPoint()):
            self.clicked.emit(self.time_seconds)
        super().mouseReleaseEvent(event)
