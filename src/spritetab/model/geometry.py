"""
Sprite sheet geometry.

The sheet carries no metadata about its grid. Rows and columns are inferred
from the pixel size, assuming a fixed tile width and a 16:9 tile. Sheets that
do not follow these assumptions resolve to a wrong split; nothing here tries
to detect that.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from PySide6.QtCore import QRectF

from spritetab.config import SPRITE_WIDTH_GUESS, TILE_ASPECT_RATIO
from spritetab.model.timeline import background_position

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Rounds like JavaScript's Math.round (x.5 goes up), not banker's rounding."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SpriteGeometry:
    columns: int
    rows: int
    source_width: int = 0
    source_height: int = 0
    aspect_ratio: float = TILE_ASPECT_RATIO

    @property
    def tile_count(self) -> int:
        return self.columns * self.rows

    @property
    def is_valid(self) -> bool:
        return self.columns >= 1 and self.rows >= 1

    @property
    def tile_width(self) -> float:
        """Width of one tile in sheet pixels."""
        if self.columns < 1:
            return 0.0
        return self.source_width / self.columns

    @property
    def tile_height(self) -> float:
        """Height of one tile in sheet pixels (from the assumed aspect ratio)."""
        return self.tile_width * self.aspect_ratio

    def source_rect(self, index: int) -> QRectF:
        """
        Returns the part of the sheet shown by tile `index`.

        The sheet is positioned the way a CSS background with
        `background-size: columns*100%` and percentage `background-position`
        would be: x% of the free space left and right, y% of the free space
        above and below.
        """
        if not self.is_valid:
            return QRectF()

        x_pct, y_pct = background_position(index, self.columns, self.rows)
        w = self.tile_width
        h = self.tile_height
        x = (x_pct / 100.0) * (self.source_width - w)
        y = (y_pct / 100.0) * (self.source_height - h)
        return QRectF(x, y, w, h)


def resolve_sprite_geometry(
    source_width_px: int,
    source_height_px: int,
    assumed_tile_width_px: float = SPRITE_WIDTH_GUESS,
    assumed_aspect_ratio: float = TILE_ASPECT_RATIO,
) -> SpriteGeometry:
    """
    Infers the column/row split of a sprite sheet from its pixel size.

    columns = round(width / tile_width)
    tile_height = (width / columns) * aspect_ratio
    rows = round(height / tile_height)

    A sheet too small to hold a single column or row yields a geometry with
    zero tiles instead of raising.
    """
    columns = round_half_up(source_width_px / assumed_tile_width_px) if assumed_tile_width_px > 0 else 0
    if columns < 1:
        logger.warning(f"Sprite sheet {source_width_px}x{source_height_px} resolves to 0 columns.")
        return SpriteGeometry(0, 0, source_width_px, source_height_px, assumed_aspect_ratio)

    tile_height_px = (source_width_px / columns) * assumed_aspect_ratio
    rows = round_half_up(source_height_px / tile_height_px) if tile_height_px > 0 else 0
    if rows < 1:
        logger.warning(f"Sprite sheet {source_width_px}x{source_height_px} resolves to 0 rows.")
        return SpriteGeometry(columns, 0, source_width_px, source_height_px, assumed_aspect_ratio)

    geometry = SpriteGeometry(columns, rows, source_width_px, source_height_px, assumed_aspect_ratio)
    logger.info(
        f"Sprite sheet {source_width_px}x{source_height_px}: "
        f"{columns} columns x {rows} rows = {geometry.tile_count} tiles"
    )
    return geometry
