"""
QMediaPlayer adapter.

Kept apart from `media.py` so that only the window, which owns the player,
needs a multimedia backend.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtMultimedia import QMediaPlayer


class QtMediaElement(QObject):
    """Adapts a QMediaPlayer (milliseconds, positionChanged) to MediaElement."""
    time_updated = Signal(float)

    def __init__(self, player: QMediaPlayer, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.player = player
        self.player.positionChanged.connect(self._on_position_changed)

    @property
    def current_time(self) -> float:
        return self.player.position() / 1000.0

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self.player.setPosition(int(round(seconds * 1000.0)))

    @property
    def is_ready(self) -> bool:
        """True once the player has media it can seek in."""
        return self.player.mediaStatus() in (
            QMediaPlayer.MediaStatus.LoadedMedia,
            QMediaPlayer.MediaStatus.BufferingMedia,
            QMediaPlayer.MediaStatus.BufferedMedia,
            QMediaPlayer.MediaStatus.EndOfMedia,
        )

    def play(self) -> None:
        self.player.play()

    def _on_position_changed(self, position_ms: int) -> None:
        self.time_updated.emit(position_ms / 1000.0)
