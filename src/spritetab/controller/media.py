"""
Media element access.

The sprite tab never owns the player. It talks to whatever the host exposes
through the small `MediaElement` interface and waits for it with
`MediaDiscovery`. The QMediaPlayer adapter lives in `player.py`.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QTimer, Signal

from spritetab.config import DISCOVERY_INTERVAL_MS

logger = logging.getLogger(__name__)


class MediaElement(Protocol):
    """What the synchronizer needs from a player."""
    time_updated: Signal  # emits the position in seconds

    @property
    def current_time(self) -> float: ...

    @current_time.setter
    def current_time(self, seconds: float) -> None: ...

    def play(self) -> None: ...


MediaLocator = Callable[[], Optional[MediaElement]]


class MediaDiscovery(QObject):
    """
    Polls `locator` until it returns a media element.

    `found` is emitted exactly once, after which the timer is stopped for good.
    With `max_attempts` set, `timed_out` is emitted instead once the attempts
    are used up.
    """
    found = Signal(object)
    timed_out = Signal()

    def __init__(
        self,
        locator: MediaLocator,
        interval_ms: int = DISCOVERY_INTERVAL_MS,
        max_attempts: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._locator = locator
        self._max_attempts = max_attempts
        self._attempts = 0
        self._done = False

        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self.poll)

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def is_done(self) -> bool:
        return self._done

    def start(self) -> None:
        """Checks once right away, then keeps polling on the timer."""
        if self._done:
            return
        if not self.poll():
            self.timer.start()

    def stop(self) -> None:
        self._done = True
        self.timer.stop()

    def poll(self) -> bool:
        if self._done:
            self.timer.stop()
            return True

        self._attempts += 1
        media = self._locator()
        if media is not None:
            logger.info(f"Media element found after {self._attempts} attempt(s).")
            self.stop()
            self.found.emit(media)
            return True

        if self._max_attempts is not None and self._attempts >= self._max_attempts:
            logger.warning(f"No media element after {self._attempts} attempts; giving up.")
            self.stop()
            self.timed_out.emit()
            return True

        return False
