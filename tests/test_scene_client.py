"""
Tests for scene data parsing and the GraphQL client.
"""
import json
from types import SimpleNamespace

import pytest

from spritetab.controller.scene_client import SceneDataClient, SpriteSheetLoader
from spritetab.model.scene import SceneMedia
from tests.conftest import make_sheet, wait_for


def response(scene):
    return json.dumps({"data": {"findScene": scene}}).encode("utf-8")


@pytest.fixture
def client(qapp):
    client = SceneDataClient("http://localhost:9999/", api_key="secret")
    client.loaded, client.failed = [], []
    client.scene_loaded.connect(lambda request_id, scene: client.loaded.append((request_id, scene)))
    client.scene_failed.connect(
        lambda request_id, scene_id, msg: client.failed.append((request_id, scene_id, msg))
    )
    return client


class TestSceneMedia:
    def test_full_scene(self):
        scene = SceneMedia.from_graphql("5", {"findScene": {
            "id": "5",
            "title": "Beach",
            "files": [{"duration": 754.2}],
            "paths": {"sprite": "http://x/sprite.jpg", "stream": "http://x/stream"},
        }})

        assert scene == SceneMedia("5", "http://x/sprite.jpg", 754.2, "http://x/stream", "Beach")
        assert scene.has_sprites

    def test_missing_duration_is_zero(self):
        scene = SceneMedia.from_graphql("5", {"findScene": {"id": "5", "files": [], "paths": {"sprite": "s"}}})

        assert scene.duration_seconds == 0.0

    def test_null_sprite(self):
        scene = SceneMedia.from_graphql("5", {"findScene": {"id": "5", "paths": {"sprite": None}}})

        assert scene.sprite_sheet_url is None
        assert not scene.has_sprites

    def test_unknown_scene(self):
        assert SceneMedia.from_graphql("5", {"findScene": None}) is None
        assert SceneMedia.from_graphql("5", None) is None


class TestSceneDataClient:
    def test_endpoint(self, client):
        assert client.endpoint == "http://localhost:9999/graphql"

    def test_payload_success(self, client):
        client.handle_payload(4, "9", response({
            "id": "9", "files": [{"duration": 120}], "paths": {"sprite": "http://x/s.jpg"},
        }))

        assert len(client.loaded) == 1
        assert client.loaded[0][0] == 4
        assert client.loaded[0][1].duration_seconds == 120.0
        assert client.failed == []

    def test_payload_not_found(self, client):
        client.handle_payload(4, "9", response(None))

        assert client.loaded == []
        assert client.failed[0][:2] == (4, "9")

    def test_payload_bad_json(self, client):
        client.handle_payload(4, "9", b"<html>502</html>")

        assert client.failed and "Invalid JSON" in client.failed[0][2]

    def test_each_fetch_gets_new_request_number(self, client, monkeypatch):
        posted = []

        def post(request, body):
            posted.append(body)
            return SimpleNamespace(finished=SimpleNamespace(connect=lambda slot: None))

        monkeypatch.setattr(client._manager, "post", post)

        first = client.fetch_scene("12")
        second = client.fetch_scene("12")

        assert second != first
        assert len(posted) == 2


class TestSpriteSheetLoader:
    def test_local_file_busy_until_delivered(self, qapp, tmp_path):
        path = tmp_path / "sprite.png"
        assert make_sheet(800, 360).save(str(path))
        loader = SpriteSheetLoader()
        loaded = []
        loader.loaded.connect(loaded.append)

        loader.load(str(path))
        assert loader.busy
        loader.load(str(path))
        assert wait_for(loader.loaded)
        wait_for(loader.loaded, timeout_ms=100)

        assert len(loaded) == 1
        assert not loader.busy

    def test_failed_local_read_clears_busy(self, qapp, tmp_path):
        loader = SpriteSheetLoader()

        loader.load(str(tmp_path / "missing.png"))
        assert wait_for(loader.failed)

        assert not loader.busy
