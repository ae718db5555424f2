"""
Playback Synchronizer
=====================
Keeps exactly one sprite tile highlighted in step with the player.

The player may report its position on every frame. Work is only done when the
position crosses into a different tile, so the grid sees at most one
highlight change per tile transition.

Classes:
    SyncState: UNATTACHED until a media element is attached, then ATTACHED.
    PlaybackSynchronizer: Maps position -> tile and drives the grid.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from PySide6.QtCore import QObject, Signal

from spritetab.controller.media import MediaElement
from spritetab.model.settings import SettingsStore
from spritetab.model.timeline import time_to_index

logger = logging.getLogger(__name__)


class HighlightTarget(Protocol):
    """The grid side of the synchronizer."""

    @property
    def tile_count(self) -> int: ...

    def set_tile_active(self, index: int, active: bool) -> None: ...

    def scroll_to_tile(self, index: int) -> None: ...


class SyncState(Enum):
    UNATTACHED = "unattached"
    ATTACHED = "attached"


class PlaybackSynchronizer(QObject):
    # Emitted with the new active index whenever the highlight moves
    active_changed = Signal(int)

    def __init__(
        self,
        target: HighlightTarget,
        duration: float,
        settings_store: SettingsStore,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.target = target
        self.duration = duration
        self.settings_store = settings_store

        self.state = SyncState.UNATTACHED
        self.media: Optional[MediaElement] = None
        self.active_index: int = -1

    def attach(self, media: MediaElement) -> None:
        """
        Subscribes to `media` and syncs once immediately.

        Only the first call has an effect; there is no detach.
        """
        if self.state is SyncState.ATTACHED:
            logger.debug("Synchronizer already attached; ignoring.")
            return

        self.media = media
        media.time_updated.connect(self.on_time_update)
        self.state = SyncState.ATTACHED
        logger.info("Synchronizer attached to media element.")

        self.sync(media.current_time)

    def release(self) -> None:
        """Drops the subscription when the owning panel is torn down."""
        if self.media is not None:
            try:
                self.media.time_updated.disconnect(self.on_time_update)
            except (RuntimeError, TypeError):
                logger.debug("Media element already gone while releasing synchronizer.")
            self.media = None

    def on_time_update(self, seconds: float) -> None:
        self.sync(seconds)

    def sync(self, current_time: float) -> None:
        if self.duration <= 0:
            return
        total = self.target.tile_count
        if total < 1:
            return

        new_index = time_to_index(current_time, self.duration, total)
        if new_index == self.active_index:
            return

        if self.active_index >= 0:
            self.target.set_tile_active(self.active_index, False)
        self.target.set_tile_active(new_index, True)
        self.active_index = new_index
        self.active_changed.emit(new_index)

        if self.settings_store.settings.auto_scroll:
            self.target.scroll_to_tile(new_index)

    def reveal_active(self) -> None:
        """Scrolls the active tile into view if auto-scroll is enabled."""
        if self.active_index >= 0 and self.settings_store.settings.auto_scroll:
            self.target.scroll_to_tile(self.active_index)
