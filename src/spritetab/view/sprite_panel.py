"""
Sprite Panel
============
The "Sprites" tab: controls bar, scrollable tile grid and a status line.

Lifecycle
---------
1. The host hands over the scene (or reports that it could not be fetched).
2. The sprite sheet is loaded; on success its geometry is resolved and the
   grid is built once.
3. A PlaybackSynchronizer is created and attached as soon as the host's media
   element shows up.

A panel that has been disposed ignores every late result (scene data, sheet
image, media discovery) instead of touching its torn-down widgets.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QScrollArea

from spritetab.config import NO_SPRITES_MESSAGE, VIDEO_NOT_READY_MESSAGE, DISCOVERY_INTERVAL_MS
from spritetab.controller.media import MediaDiscovery, MediaLocator, MediaElement
from spritetab.controller.scene_client import SpriteSheetLoader
from spritetab.controller.synchronizer import PlaybackSynchronizer
from spritetab.model.geometry import SpriteGeometry, resolve_sprite_geometry
from spritetab.model.scene import SceneMedia
from spritetab.model.settings import SettingsStore, Settings
from spritetab.view.base import BasePanel
from spritetab.view.controls import SpriteControlsBar
from spritetab.view.grid import SpriteGrid

logger = logging.getLogger(__name__)


class SpritePanel(BasePanel):
    def __init__(
        self,
        store: SettingsStore,
        media_locator: MediaLocator,
        loader: Optional[SpriteSheetLoader] = None,
        discovery_interval_ms: int = DISCOVERY_INTERVAL_MS,
        max_discovery_attempts: Optional[int] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(store, parent)
        self.media_locator = media_locator
        self.loader = loader if loader is not None else SpriteSheetLoader(parent=self)
        self._discovery_interval_ms = discovery_interval_ms
        self._max_discovery_attempts = max_discovery_attempts

        self.alive = True
        self.scene: Optional[SceneMedia] = None
        self.geometry: Optional[SpriteGeometry] = None
        self.synchronizer: Optional[PlaybackSynchronizer] = None
        self.discovery: Optional[MediaDiscovery] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # --- Controls (stay on top while the grid scrolls) ---
        self.controls = SpriteControlsBar(store, self)
        layout.addWidget(self.controls)

        # --- Status ---
        self.lbl_status = QLabel("Loading sprites...", self)
        self.lbl_status.setContentsMargins(20, 20, 20, 20)
        self.lbl_status.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        layout.addWidget(self.lbl_status)

        # --- Grid ---
        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        content = QWidget(self.scroll_area)
        content_layout = QVBoxLayout(content)
        # Keep the last row clear of the window edge
        content_layout.setContentsMargins(0, 15, 0, 50)
        self.grid = SpriteGrid(self.scroll_area, content)
        content_layout.addWidget(self.grid)
        content_layout.addStretch(1)
        self.scroll_area.setWidget(content)
        self.scroll_area.setVisible(False)
        layout.addWidget(self.scroll_area, 1)

        # --- Wiring ---
        self.store.settings_changed.connect(self.on_settings_changed)
        self.loader.loaded.connect(self.on_sheet_loaded)
        self.loader.failed.connect(self.on_sheet_failed)
        self.grid.tile_selected.connect(self.on_tile_selected)

    # --- STATUS ---

    def show_message(self, text: str) -> None:
        self.lbl_status.setText(text)
        self.lbl_status.setVisible(True)

    def show_unavailable(self, reason: str = "") -> None:
        if not self._check_alive("unavailable notice"):
            return
        if reason:
            logger.info(f"No sprites: {reason}")
        self.scroll_area.setVisible(False)
        self.show_message(NO_SPRITES_MESSAGE)

    # --- SCENE / SHEET ---

    def set_scene(self, scene: Optional[SceneMedia]) -> None:
        """Receives the fetched scene; None means the fetch came back empty."""
        if not self._check_alive("scene data"):
            return
        if scene is None or not scene.has_sprites:
            self.show_unavailable("scene has no sprite sheet")
            return

        self.scene = scene
        self.loader.load(scene.sprite_sheet_url)

    def on_sheet_loaded(self, image: QImage) -> None:
        if not self._check_alive("sprite sheet"):
            return
        if self.scene is None:
            return
        if self.geometry is not None:
            logger.debug("Sprite sheet already rendered; ignoring duplicate load.")
            return

        geometry = resolve_sprite_geometry(image.width(), image.height())
        if geometry.tile_count == 0:
            self.show_unavailable(f"sheet {image.width()}x{image.height()} yields no tiles")
            return

        self.geometry = geometry
        self.grid.build(geometry, self.scene, self.store.settings, image)
        self.lbl_status.setVisible(False)
        self.scroll_area.setVisible(True)

        self.synchronizer = PlaybackSynchronizer(
            self.grid, self.scene.duration_seconds, self.store, parent=self
        )
        self.discovery = MediaDiscovery(
            self.media_locator,
            interval_ms=self._discovery_interval_ms,
            max_attempts=self._max_discovery_attempts,
            parent=self,
        )
        self.discovery.found.connect(self.on_media_found)
        self.discovery.timed_out.connect(self.on_media_timed_out)
        self.discovery.start()

    def on_sheet_failed(self, message: str) -> None:
        self.show_unavailable(message)

    # --- MEDIA ---

    def on_media_found(self, media: MediaElement) -> None:
        if not self._check_alive("media element"):
            return
        self.synchronizer.attach(media)

    def on_media_timed_out(self) -> None:
        if not self._check_alive("media timeout"):
            return
        self.show_message(VIDEO_NOT_READY_MESSAGE)

    def on_tile_selected(self, seconds: float) -> None:
        media = self.synchronizer.media if self.synchronizer is not None else None
        if media is None:
            media = self.media_locator()
        if media is None:
            logger.debug("Tile clicked but no media element is available.")
            return
        logger.debug(f"Seeking to {seconds:.2f}s")
        media.current_time = seconds
        media.play()

    # --- SETTINGS ---

    def on_settings_changed(self, key: str, settings: Settings) -> None:
        if not self.alive:
            return
        self.controls.sync_from(settings)
        self.grid.apply_settings_change(key, settings)

    def reveal(self) -> None:
        """Called when the tab becomes visible."""
        if self.synchronizer is not None:
            self.synchronizer.reveal_active()

    # --- TEARDOWN ---

    def dispose(self) -> None:
        if not self.alive:
            return
        self.alive = False
        if self.discovery is not None:
            self.discovery.stop()
        if self.synchronizer is not None:
            self.synchronizer.release()
        try:
            self.store.settings_changed.disconnect(self.on_settings_changed)
        except (RuntimeError, TypeError):
            logger.debug("Settings signal was already disconnected.")
        logger.debug("Sprite panel disposed.")

    def _check_alive(self, what: str) -> bool:
        if not self.alive:
            logger.debug(f"Discarding {what} for a disposed sprite panel.")
        return self.alive
