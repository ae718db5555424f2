"""
Scene Data & Sprite Sheet Fetching
==================================
Asynchronous adapters for the two remote resources the sprite tab needs.

Why is this file needed?
------------------------
1. Responsiveness: Requests run on Qt's network stack, so the GUI never
   blocks while the server answers.
2. Signals: Results (or error messages) come back through Qt signals on the
   main thread, the same way the background workers report.

There is no retry. A failed request is reported once and the caller shows
"No sprites available.".

Classes:
    SceneDataClient: Fetches SceneMedia through GraphQL.
    SpriteSheetLoader: Downloads (or reads) the sprite sheet image.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal, QUrl, QByteArray, QTimer
from PySide6.QtGui import QImage
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkRequest, QNetworkReply

from spritetab.config import GRAPHQL_PATH
from spritetab.model.scene import SceneMedia, FIND_SCENE_QUERY

logger = logging.getLogger(__name__)


def _apply_auth(request: QNetworkRequest, api_key: Optional[str]) -> None:
    if api_key:
        request.setRawHeader(QByteArray(b"ApiKey"), QByteArray(api_key.encode("utf-8")))


class SceneDataClient(QObject):
    """
    Every `fetch_scene()` call gets its own request number, which is sent back
    with the outcome so the caller can tell a late reply from the current one.
    """
    # Signals: (request, SceneMedia) on success, (request, scene_id, message) on failure
    scene_loaded = Signal(int, object)
    scene_failed = Signal(int, str, str)

    def __init__(
        self,
        server_url: str,
        api_key: Optional[str] = None,
        manager: Optional[QNetworkAccessManager] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self._manager = manager if manager is not None else QNetworkAccessManager(self)
        self._last_request = 0

    @property
    def endpoint(self) -> str:
        return f"{self.server_url}{GRAPHQL_PATH}"

    def fetch_scene(self, scene_id: str) -> int:
        """Sends one findScene request and returns its request number."""
        self._last_request += 1
        request_id = self._last_request
        logger.info(f"Requesting scene {scene_id} from {self.endpoint} (#{request_id})")

        request = QNetworkRequest(QUrl(self.endpoint))
        request.setHeader(QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json")
        _apply_auth(request, self.api_key)

        body = json.dumps({"query": FIND_SCENE_QUERY, "variables": {"id": scene_id}})
        reply = self._manager.post(request, QByteArray(body.encode("utf-8")))
        reply.finished.connect(lambda: self._on_reply(reply, request_id, scene_id))
        return request_id

    def _on_reply(self, reply: QNetworkReply, request_id: int, scene_id: str) -> None:
        try:
            if reply.error() != QNetworkReply.NetworkError.NoError:
                self._fail(request_id, scene_id, f"Scene request failed: {reply.errorString()}")
                return
            self.handle_payload(request_id, scene_id, bytes(reply.readAll().data()))
        finally:
            reply.deleteLater()

    def handle_payload(self, request_id: int, scene_id: str, payload: bytes) -> None:
        """Parses a raw GraphQL response body and emits the outcome."""
        try:
            document = json.loads(payload)
        except ValueError as e:
            self._fail(request_id, scene_id, f"Invalid JSON from server: {e}")
            return

        if isinstance(document, dict) and document.get("errors"):
            logger.warning(f"GraphQL errors for scene {scene_id}: {document['errors']}")

        data = document.get("data") if isinstance(document, dict) else None
        scene = SceneMedia.from_graphql(scene_id, data)
        if scene is None:
            self._fail(request_id, scene_id, f"Scene {scene_id} not found.")
            return

        logger.info(
            f"Scene {scene.scene_id}: duration={scene.duration_seconds:.1f}s, "
            f"sprite={'yes' if scene.has_sprites else 'no'}"
        )
        self.scene_loaded.emit(request_id, scene)

    def _fail(self, request_id: int, scene_id: str, message: str) -> None:
        logger.warning(message)
        self.scene_failed.emit(request_id, scene_id, message)


class SpriteSheetLoader(QObject):
    """Loads a sprite sheet from an http(s) URL or a local path."""
    loaded = Signal(QImage)
    failed = Signal(str)

    def __init__(
        self,
        api_key: Optional[str] = None,
        manager: Optional[QNetworkAccessManager] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.api_key = api_key
        self._manager = manager if manager is not None else QNetworkAccessManager(self)
        # The reply for a download, the path for a local read
        self._pending: Optional[object] = None

    @property
    def busy(self) -> bool:
        return self._pending is not None

    def load(self, source: str) -> None:
        if self.busy:
            logger.debug("Sprite sheet load already in flight; ignoring new request.")
            return

        url = QUrl.fromUserInput(source)
        if url.isLocalFile():
            path = url.toLocalFile()
            self._pending = path
            # Deliver on the next loop iteration, like a network load would
            QTimer.singleShot(0, self, lambda: self._finish(QImage(path), path))
            return

        logger.info(f"Downloading sprite sheet: {url.toString()}")
        request = QNetworkRequest(url)
        _apply_auth(request, self.api_key)
        reply = self._manager.get(request)
        self._pending = reply
        reply.finished.connect(lambda: self._on_reply(reply))

    def _on_reply(self, reply: QNetworkReply) -> None:
        self._pending = None
        try:
            if reply.error() != QNetworkReply.NetworkError.NoError:
                message = f"Sprite sheet download failed: {reply.errorString()}"
                logger.warning(message)
                self.failed.emit(message)
                return
            image = QImage()
            image.loadFromData(reply.readAll())
            self._finish(image, reply.url().toString())
        finally:
            reply.deleteLater()

    def _finish(self, image: QImage, origin: str) -> None:
        self._pending = None
        if image.isNull():
            message = f"Could not decode sprite sheet: {origin}"
            logger.warning(message)
            self.failed.emit(message)
            return
        logger.debug(f"Sprite sheet loaded: {image.width()}x{image.height()} from {origin}")
        self.loaded.emit(image)
