"""
Main Application Window
=======================
The host for one Stash scene at a time: video player on the left, tabs on the
right ("Details" and "Sprites").

Why is this file needed?
------------------------
1. Composition: It creates the player, the scene client and the sprite panel
   and wires them together.
2. Scene lifecycle: `enter_scene()` / `leave_scene()` are the only way a scene
   view starts or ends. The sprite panel exists at most once per scene view
   and is rebuilt from scratch for a different scene.
3. Tabs: Switching tabs only changes the stacked widget page, so the sprite
   panel keeps its player subscription while hidden.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QUrl, QUrlQuery
from PySide6.QtGui import QAction
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QTabBar, QStackedWidget,
    QLabel, QLineEdit, QToolBar, QPushButton, QStyle, QFormLayout
)

from spritetab.application import VISIBLE_APP_NAME
from spritetab.controller.player import QtMediaElement
from spritetab.controller.scene_client import SceneDataClient, SpriteSheetLoader
from spritetab.model.scene import SceneMedia
from spritetab.model.settings import SettingsStore
from spritetab.model.timeline import format_timestamp
from spritetab.view.base import BasePanel
from spritetab.view.sprite_panel import SpritePanel

logger = logging.getLogger(__name__)

SPRITES_TAB_LABEL = "Sprites"


class DetailsPanel(BasePanel):
    """Plain scene facts, standing in for the host's own tabs."""
    def __init__(self, store: SettingsStore, parent: QWidget | None = None) -> None:
        super().__init__(store, parent)
        form = QFormLayout(self)
        self.lbl_title = QLabel("-", self)
        self.lbl_duration = QLabel("-", self)
        self.lbl_id = QLabel("-", self)
        form.addRow("Title:", self.lbl_title)
        form.addRow("Duration:", self.lbl_duration)
        form.addRow("Scene ID:", self.lbl_id)

    def show_scene(self, scene: Optional[SceneMedia]) -> None:
        if scene is None:
            self.lbl_title.setText("-")
            self.lbl_duration.setText("-")
            self.lbl_id.setText("-")
            return
        self.lbl_title.setText(scene.title or "Untitled")
        self.lbl_duration.setText(format_timestamp(scene.duration_seconds))
        self.lbl_id.setText(scene.scene_id)


class MainWindow(QMainWindow):
    def __init__(
        self,
        store: SettingsStore,
        client: SceneDataClient,
        player: Optional[QMediaPlayer] = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.client = client

        self.scene_id: Optional[str] = None
        self.scene: Optional[SceneMedia] = None
        self.sprite_panel: Optional[SpritePanel] = None
        # Request number of the scene fetch the current panel is waiting on
        self.scene_request: Optional[int] = None

        self.update_window_title()
        self.resize(1400, 900)

        # --- PLAYER ---
        self.player = player if player is not None else QMediaPlayer(self)
        self.audio = QAudioOutput(self)
        self.player.setAudioOutput(self.audio)
        self.media_element = QtMediaElement(self.player, self)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        main_layout.addWidget(splitter)

        # --- LEFT SIDE: Video ---
        video_side = QWidget()
        v = QVBoxLayout(video_side)
        self.video_widget = QVideoWidget(video_side)
        self.player.setVideoOutput(self.video_widget)
        v.addWidget(self.video_widget, 1)

        transport = QHBoxLayout()
        self.btn_play = QPushButton()
        self.btn_play.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPlay))
        self.btn_play.clicked.connect(self.toggle_play)
        transport.addWidget(self.btn_play)
        self.lbl_position = QLabel("0:00", video_side)
        transport.addWidget(self.lbl_position)
        transport.addStretch()
        v.addLayout(transport)
        splitter.addWidget(video_side)

        # --- RIGHT SIDE: Tabs ---
        tabs_side = QWidget()
        t = QVBoxLayout(tabs_side)
        t.setContentsMargins(0, 0, 0, 0)
        t.setSpacing(0)

        self.tab_bar = QTabBar(tabs_side)
        self.tab_bar.setDrawBase(True)
        self.tab_bar.setShape(QTabBar.Shape.RoundedNorth)
        self.tab_bar.setExpanding(False)
        self.tab_bar.setStyleSheet("""
                    QTabBar::tab { height: 35px; min-width: 100px; }
                    QTabBar::tab:selected { font-weight: bold; }
                """)
        t.addWidget(self.tab_bar)

        self.tab_stack = QStackedWidget(tabs_side)
        t.addWidget(self.tab_stack, 1)

        self.details_panel = DetailsPanel(store, self)
        self.tab_bar.addTab("Details")
        self.tab_stack.addWidget(self.details_panel)
        splitter.addWidget(tabs_side)

        splitter.setSizes([800, 600])

        # --- SIGNAL CONNECTIONS ---
        self.tab_bar.currentChanged.connect(self.on_tab_changed)
        self.client.scene_loaded.connect(self.on_scene_loaded)
        self.client.scene_failed.connect(self.on_scene_failed)
        self.player.positionChanged.connect(self.on_position_changed)
        self.player.playbackStateChanged.connect(self.update_play_icon)

        self._create_toolbar()

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Scene", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addWidget(QLabel(" Scene ID: "))
        self.edit_scene = QLineEdit(toolbar)
        self.edit_scene.setMaximumWidth(120)
        self.edit_scene.returnPressed.connect(self.on_open_clicked)
        toolbar.addWidget(self.edit_scene)

        self.act_open = QAction("Open", self)
        self.act_open.triggered.connect(self.on_open_clicked)
        toolbar.addAction(self.act_open)

        self.act_close = QAction("Close", self)
        self.act_close.triggered.connect(self.leave_scene)
        toolbar.addAction(self.act_close)

    # --- HELPER METHODS ---

    def update_window_title(self) -> None:
        title = VISIBLE_APP_NAME
        if self.scene is not None and self.scene.title:
            title += f" - [{self.scene.title}]"
        elif self.scene_id:
            title += f" - [Scene {self.scene_id}]"
        self.setWindowTitle(title)

    def sprite_tab_index(self) -> int:
        if self.sprite_panel is None:
            return -1
        return self.tab_stack.indexOf(self.sprite_panel)

    def locate_media(self) -> Optional[QtMediaElement]:
        """Returns the media element once the player has loaded the scene."""
        if self.sprite_panel is None or not self.media_element.is_ready:
            return None
        return self.media_element

    def stream_url(self, scene: SceneMedia) -> QUrl:
        url = QUrl(scene.stream_url)
        if self.client.api_key:
            query = QUrlQuery(url)
            query.addQueryItem("apikey", self.client.api_key)
            url.setQuery(query)
        return url

    # --- SCENE LIFECYCLE ---

    def enter_scene(self, scene_id: str) -> None:
        """Opens a scene view. Re-entering the current scene does nothing."""
        scene_id = str(scene_id).strip()
        if not scene_id:
            return
        if scene_id == self.scene_id and self.sprite_panel is not None:
            logger.debug(f"Scene {scene_id} already open.")
            return

        self.leave_scene()
        logger.info(f"Entering scene {scene_id}")
        self.scene_id = scene_id
        self.edit_scene.setText(scene_id)

        self.sprite_panel = SpritePanel(
            self.store,
            media_locator=self.locate_media,
            loader=SpriteSheetLoader(api_key=self.client.api_key),
            parent=self,
        )
        self.tab_bar.addTab(SPRITES_TAB_LABEL)
        self.tab_stack.addWidget(self.sprite_panel)

        self.update_window_title()
        self.scene_request = self.client.fetch_scene(scene_id)

    def leave_scene(self) -> None:
        """Tears the sprite tab down and stops playback."""
        if self.sprite_panel is not None:
            logger.info(f"Leaving scene {self.scene_id}")
            panel = self.sprite_panel
            self.sprite_panel = None
            panel.dispose()

            index = self.tab_stack.indexOf(panel)
            self.tab_stack.removeWidget(panel)
            if index >= 0:
                self.tab_bar.removeTab(index)
            panel.deleteLater()

        self.player.stop()
        self.player.setSource(QUrl())
        self.scene_id = None
        self.scene_request = None
        self.scene = None
        self.details_panel.show_scene(None)
        self.update_window_title()

    def on_scene_loaded(self, request_id: int, scene: SceneMedia) -> None:
        if not self._is_current(request_id):
            logger.debug(f"Discarding stale scene data for {scene.scene_id} (#{request_id})")
            return
        self.scene_request = None

        self.scene = scene
        self.details_panel.show_scene(scene)
        self.update_window_title()

        if scene.stream_url:
            self.player.setSource(self.stream_url(scene))
        else:
            logger.warning(f"Scene {scene.scene_id} has no stream URL.")

        self.sprite_panel.set_scene(scene)

    def on_scene_failed(self, request_id: int, scene_id: str, message: str) -> None:
        if not self._is_current(request_id):
            logger.debug(f"Discarding stale failure for scene {scene_id} (#{request_id})")
            return
        self.scene_request = None
        self.sprite_panel.show_unavailable(message)

    def _is_current(self, request_id: int) -> bool:
        """Only the fetch started by the live panel may touch it, and only once."""
        return self.sprite_panel is not None and request_id == self.scene_request

    # --- SLOTS ---

    def on_open_clicked(self) -> None:
        self.enter_scene(self.edit_scene.text())

    def on_tab_changed(self, index: int) -> None:
        self.tab_stack.setCurrentIndex(index)
        if self.sprite_panel is not None and index == self.sprite_tab_index():
            self.sprite_panel.reveal()

    def on_position_changed(self, position_ms: int) -> None:
        self.lbl_position.setText(format_timestamp(position_ms / 1000.0))

    def toggle_play(self) -> None:
        if self.player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.player.pause()
        else:
            self.player.play()

    def update_play_icon(self) -> None:
        if self.player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.btn_play.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPause))
        else:
            self.btn_play.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPlay))

    def closeEvent(self, event, /) -> None:
        self.leave_scene()
        event.accept()
