"""
Pytest configuration and fixtures for the sprite tab tests.
"""
import os

# Must be set before the first QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QObject, QSettings, Signal, QEventLoop, QTimer
from PySide6.QtGui import QImage, QColor
from PySide6.QtWidgets import QApplication

from spritetab.model.scene import SceneMedia
from spritetab.model.settings import SettingsStore


class FakeMedia(QObject):
    """Stand-in for the host's player."""
    time_updated = Signal(float)

    def __init__(self, current_time: float = 0.0) -> None:
        super().__init__()
        self.current_time = current_time
        self.play_calls = 0

    def play(self) -> None:
        self.play_calls += 1

    def tick(self, seconds: float) -> None:
        self.current_time = seconds
        self.time_updated.emit(seconds)


class RecordingTarget:
    """Highlight target that records every mutation the synchronizer makes."""

    def __init__(self, tile_count: int) -> None:
        self.tile_count = tile_count
        self.mutations: list[tuple[int, bool]] = []
        self.scrolls: list[int] = []

    def set_tile_active(self, index: int, active: bool) -> None:
        self.mutations.append((index, active))

    def scroll_to_tile(self, index: int) -> None:
        self.scrolls.append(index)

    @property
    def active(self) -> set[int]:
        state: dict[int, bool] = {}
        for index, active in self.mutations:
            state[index] = active
        return {i for i, a in state.items() if a}


def wait_for(signal, timeout_ms: int = 2000) -> bool:
    """Spins an event loop until `signal` fires or the timeout passes."""
    loop = QEventLoop()
    fired = []

    def on_fired(*args):
        fired.append(args)
        loop.quit()

    signal.connect(on_fired)
    QTimer.singleShot(timeout_ms, loop.quit)
    loop.exec()
    signal.disconnect(on_fired)
    return bool(fired)


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def qsettings(tmp_path):
    """INI-backed QSettings in a temporary directory."""
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def store(qapp, qsettings) -> SettingsStore:
    return SettingsStore(qsettings)


@pytest.fixture
def media() -> FakeMedia:
    return FakeMedia()


def make_sheet(width: int, height: int) -> QImage:
    image = QImage(width, height, QImage.Format.Format_RGB32)
    image.fill(QColor("darkblue"))
    return image


@pytest.fixture
def sheet_20(qapp) -> QImage:
    """800x360 sheet: 5 columns x 4 rows of 160x90 tiles."""
    return make_sheet(800, 360)


@pytest.fixture
def scene_120() -> SceneMedia:
    return SceneMedia(
        scene_id="42",
        sprite_sheet_url="/tmp/sprite.jpg",
        duration_seconds=120.0,
        stream_url="http://localhost:9999/scene/42/stream",
        title="Test Scene",
    )
