"""
Configuration & Constants
=========================
Central registry for the constants shared by the sprite tab.

Exports:
    SETTINGS_KEY (str): QSettings key holding the layout preferences blob.
    SPRITE_WIDTH_GUESS (int): Assumed pixel width of one tile in the sheet.
    TILE_ASPECT_RATIO (float): Assumed tile height / width.
    DISCOVERY_INTERVAL_MS (int): Media element discovery poll interval.
    DEFAULT_SERVER_URL (str): Stash server used when none is configured.
"""

SETTINGS_KEY: str = "sprites/settings"
SERVER_URL_KEY: str = "server/url"
API_KEY_KEY: str = "server/api_key"

SPRITE_WIDTH_GUESS: int = 160
TILE_ASPECT_RATIO: float = 9 / 16

DISCOVERY_INTERVAL_MS: int = 1000
SCROLL_ANIMATION_MS: int = 250

MIN_COLUMNS: int = 1
MAX_COLUMNS: int = 12

DEFAULT_SERVER_URL: str = "http://localhost:9999"
GRAPHQL_PATH: str = "/graphql"

NO_SPRITES_MESSAGE: str = "No sprites available."
VIDEO_NOT_READY_MESSAGE: str = "Video not ready."
