"""
Application Initialization
==========================
Builds the objects the window needs and starts the Qt event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line and configures logging.
2. Instantiates the SettingsStore and the SceneDataClient.
3. Passes them into the MainWindow and opens the requested scene.

Run with: python -m spritetab --server http://localhost:9999 --scene 42
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QSettings

from spritetab.application import create_app
from spritetab.config import DEFAULT_SERVER_URL, SERVER_URL_KEY, API_KEY_KEY
from spritetab.controller.scene_client import SceneDataClient
from spritetab.logging_config import setup_logging
from spritetab.model.settings import SettingsStore
from spritetab.view.main_window import MainWindow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spritetab",
        description="Browse a Stash scene's sprite sheet in sync with playback.",
    )
    parser.add_argument("--server", help=f"Stash server URL (default: stored value or {DEFAULT_SERVER_URL})")
    parser.add_argument("--api-key", help="Stash API key (default: stored value or $STASH_API_KEY)")
    parser.add_argument("--scene", help="Scene ID to open on start")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def resolve_connection(args: argparse.Namespace, qsettings: QSettings) -> tuple[str, Optional[str]]:
    """
    Command line wins over stored values; given values are remembered.
    """
    server = args.server or qsettings.value(SERVER_URL_KEY, DEFAULT_SERVER_URL, type=str)
    api_key = args.api_key or os.environ.get("STASH_API_KEY") or qsettings.value(API_KEY_KEY, "", type=str)

    if args.server:
        qsettings.setValue(SERVER_URL_KEY, args.server)
    if args.api_key:
        qsettings.setValue(API_KEY_KEY, args.api_key)
    return server, api_key or None


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Settings & data access
    qsettings = QSettings()
    server, api_key = resolve_connection(args, qsettings)
    store = SettingsStore(qsettings)
    client = SceneDataClient(server, api_key=api_key)

    # 4. Main window
    window = MainWindow(store, client)
    window.show()
    if args.scene:
        window.enter_scene(args.scene)

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
