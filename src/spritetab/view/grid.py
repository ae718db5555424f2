"""
Sprite Grid
===========
Builds the tile widgets for one sprite sheet and re-applies layout settings
to them in place.

Why is this file needed?
------------------------
1. Ownership: The grid is the only writer of tile visuals (border, label,
   highlight). The synchronizer asks; the grid does.
2. Stability: Tiles are built once per sheet. Changing the column count,
   compact mode or timestamps never destroys or recreates a tile.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from PySide6.QtCore import Qt, QPoint, QPropertyAnimation, QEasingCurve, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QWidget, QGridLayout, QScrollArea

from spritetab.config import SCROLL_ANIMATION_MS
from spritetab.model.geometry import SpriteGeometry
from spritetab.model.scene import SceneMedia
from spritetab.model.settings import Settings
from spritetab.model.timeline import tile_times
from spritetab.view.tile import SpriteTile

logger = logging.getLogger(__name__)

GAP_PX = 5


class SpriteGrid(QWidget):
    # Emits the time (seconds) of the clicked tile
    tile_selected = Signal(float)

    def __init__(self, scroll_area: Optional[QScrollArea] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.scroll_area = scroll_area
        self.tiles: list[SpriteTile] = []
        self.columns: int = 1

        self._source_key: Optional[tuple] = None
        self._scroll_anim: Optional[QPropertyAnimation] = None

        self.grid_layout = QGridLayout(self)
        self.grid_layout.setContentsMargins(0, 0, GAP_PX, 0)
        self.grid_layout.setAlignment(Qt.AlignmentFlag.AlignTop)

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def spacing(self) -> int:
        return self.grid_layout.horizontalSpacing()

    def build(
        self,
        geometry: SpriteGeometry,
        scene: SceneMedia,
        settings: Settings,
        sheet: Union[QImage, QPixmap],
    ) -> list[SpriteTile]:
        """
        Creates `geometry.tile_count` tiles in raster order.

        Calling it again for the same sheet and scene returns the existing
        tiles untouched.
        """
        key = (geometry, scene.scene_id, scene.sprite_sheet_url, scene.duration_seconds)
        if self._source_key == key:
            return self.tiles
        if self.tiles:
            self._clear()

        pixmap = QPixmap.fromImage(sheet) if isinstance(sheet, QImage) else sheet
        times = tile_times(scene.duration_seconds, geometry.tile_count)

        for i in range(geometry.tile_count):
            tile = SpriteTile(
                index=i,
                time_seconds=float(times[i]),
                sheet=pixmap,
                source=geometry.source_rect(i),
                compact=settings.compact,
                show_timestamp=settings.show_timestamps,
                parent=self,
            )
            tile.clicked.connect(self.tile_selected)
            self.tiles.append(tile)

        self._source_key = key
        self._set_spacing(settings.compact)
        self._reflow(settings.columns)
        logger.info(f"Built {len(self.tiles)} sprite tiles.")
        return self.tiles

    def apply_settings_change(self, key: str, settings: Settings) -> None:
        """Re-applies one changed setting to the existing tiles."""
        if key == "columns":
            self._reflow(settings.columns)
        elif key == "compact":
            self._set_spacing(settings.compact)
            for tile in self.tiles:
                tile.set_compact(settings.compact)
        elif key == "show_timestamps":
            for tile in self.tiles:
                tile.set_timestamp_visible(settings.show_timestamps)
        elif key == "auto_scroll":
            # Picked up by the synchronizer on its next tick
            pass
        else:
            logger.debug(f"Unhandled settings key: {key}")

    # --- HIGHLIGHT TARGET ---

    def set_tile_active(self, index: int, active: bool) -> None:
        if 0 <= index < len(self.tiles):
            self.tiles[index].set_active(active)

    def scroll_to_tile(self, index: int) -> None:
        """Smoothly scrolls the enclosing scroll area to centre tile `index`."""
        if self.scroll_area is None or not (0 <= index < len(self.tiles)):
            return

        tile = self.tiles[index]
        content = self.scroll_area.widget()
        if content is None:
            return

        center_y = tile.mapTo(content, QPoint(0, 0)).y() + tile.height() // 2
        bar = self.scroll_area.verticalScrollBar()
        target = center_y - self.scroll_area.viewport().height() // 2
        target = max(bar.minimum(), min(target, bar.maximum()))

        if self._scroll_anim is not None:
            self._scroll_anim.stop()
        anim = QPropertyAnimation(bar, b"value", self)
        anim.setDuration(SCROLL_ANIMATION_MS)
        anim.setStartValue(bar.value())
        anim.setEndValue(target)
        anim.setEasingCurve(QEasingCurve.Type.OutCubic)
        anim.start()
        self._scroll_anim = anim

    # --- HELPERS ---

    def _set_spacing(self, compact: bool) -> None:
        gap = 0 if compact else GAP_PX
        self.grid_layout.setHorizontalSpacing(gap)
        self.grid_layout.setVerticalSpacing(gap)

    def _reflow(self, columns: int) -> None:
        """Places the existing tiles into `columns` equal-width columns."""
        for tile in self.tiles:
            self.grid_layout.removeWidget(tile)

        previous = max(self.columns, self.grid_layout.columnCount())
        for col in range(previous):
            self.grid_layout.setColumnStretch(col, 0)

        self.columns = columns
        for col in range(columns):
            self.grid_layout.setColumnStretch(col, 1)

        for tile in self.tiles:
            row, col = divmod(tile.index, columns)
            self.grid_layout.addWidget(tile, row, col)

    def _clear(self) -> None:
        for tile in self.tiles:
            self.grid_layout.removeWidget(tile)
            tile.deleteLater()
        self.tiles = []
        self._source_key = None
