"""
Time <-> tile mapping.

Tiles are evenly spaced over the scene: tile i starts at (i / n) * duration.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def time_to_index(t: float, duration: float, tile_count: int) -> int:
    """
    Returns the index of the tile covering playback time `t`.

    Always in [0, tile_count - 1]; times outside the scene are clamped.

    Raises:
        ValueError: If duration <= 0 or tile_count < 1.
    """
    if duration <= 0:
        raise ValueError(f"Duration must be positive, got {duration}.")
    if tile_count < 1:
        raise ValueError(f"Tile count must be at least 1, got {tile_count}.")

    idx = math.floor((t / duration) * tile_count)
    return max(0, min(idx, tile_count - 1))


def index_to_time(index: int, duration: float, tile_count: int) -> float:
    """Start time (seconds) of tile `index`."""
    return (index / tile_count) * duration


def tile_times(duration: float, tile_count: int) -> npt.NDArray[np.float64]:
    """Start times of all tiles; element i equals index_to_time(i, ...)."""
    if tile_count < 1:
        return np.empty(0, dtype=np.float64)
    return (np.arange(tile_count, dtype=np.float64) / tile_count) * duration


def background_position(index: int, columns: int, rows: int) -> tuple[float, float]:
    """
    Percentage offsets (x, y) of tile `index` inside a columns x rows sheet.

    A single column (or row) has nowhere to move, so it is anchored at 0%.
    """
    col = index % columns if columns > 0 else 0
    row = index // columns if columns > 0 else 0
    x_pct = (col / (columns - 1)) * 100.0 if columns > 1 else 0.0
    y_pct = (row / (rows - 1)) * 100.0 if rows > 1 else 0.0
    return x_pct, y_pct


def format_timestamp(seconds: float) -> str:
    """Formats seconds as m:ss, or h:mm:ss from one hour up."""
    if not seconds:
        return "0:00"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"
