"""
Scene media description as returned by the Stash GraphQL API.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

FIND_SCENE_QUERY = (
    "query FindScene($id: ID!) { findScene(id: $id) "
    "{ id title files { duration } paths { sprite stream } } }"
)


@dataclass(frozen=True)
class SceneMedia:
    scene_id: str
    sprite_sheet_url: Optional[str] = None
    duration_seconds: float = 0.0
    stream_url: Optional[str] = None
    title: str = ""

    @property
    def has_sprites(self) -> bool:
        return bool(self.sprite_sheet_url)

    @classmethod
    def from_graphql(cls, scene_id: str, data: Any) -> Optional["SceneMedia"]:
        """
        Builds SceneMedia from the `data` member of a findScene response.

        Returns None when the scene does not exist. Missing duration becomes 0,
        missing paths become None.
        """
        if not isinstance(data, dict):
            return None
        scene = data.get("findScene")
        if not isinstance(scene, dict):
            return None

        files = scene.get("files") or []
        duration = 0.0
        if files and isinstance(files[0], dict):
            try:
                duration = float(files[0].get("duration") or 0.0)
            except (TypeError, ValueError):
                logger.warning(f"Scene {scene_id}: unreadable duration {files[0].get('duration')!r}")
        duration = max(duration, 0.0)

        paths = scene.get("paths") or {}
        return cls(
            scene_id=str(scene.get("id") or scene_id),
            sprite_sheet_url=paths.get("sprite") or None,
            duration_seconds=duration,
            stream_url=paths.get("stream") or None,
            title=scene.get("title") or "",
        )
