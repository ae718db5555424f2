from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

import os
import sys

ORG_ID = "stash-plugins"
APP_ID = "sprite-tab"
ORG_DOMAIN = "https://stashapp.cc/"

VISIBLE_APP_NAME = "Stash Sprite Tab"


def create_app(argv: list[str] | None = None) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    # Settings are stored as an .ini file
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(argv if argv is not None else sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app
