"""
Layout Settings (Data Model)
============================
Holds the small set of user preferences for the sprite tab.

Why is this file needed?
------------------------
1. Persistence: Preferences survive restarts. They are stored as one JSON blob
   under a fixed QSettings key.
2. Robustness: Whatever is on disk, `load()` always returns a complete, valid
   Settings object. Bad or missing fields fall back to the defaults one by one.
3. Notification: Views subscribe to `settings_changed` to re-apply a single
   setting without rebuilding the grid.

Classes:
    Settings: Immutable snapshot of the preferences.
    SettingsStore: Load/save front end over QSettings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Mapping, Optional

from PySide6.QtCore import QObject, QSettings, Signal

from spritetab.config import SETTINGS_KEY, MIN_COLUMNS, MAX_COLUMNS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    columns: int = 4
    show_timestamps: bool = True
    compact: bool = False
    auto_scroll: bool = True

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_SETTINGS = Settings()


def _is_valid(name: str, value: Any) -> bool:
    """Checks a single persisted value against the field it belongs to."""
    if name == "columns":
        # bool is an int subclass, but True is not a column count
        return (
            isinstance(value, int)
            and not isinstance(value, bool)
            and MIN_COLUMNS <= value <= MAX_COLUMNS
        )
    return isinstance(value, bool)


def settings_from_dict(data: Any) -> Settings:
    """
    Merges persisted data over the defaults, field by field.

    Unknown keys are ignored, invalid values are replaced by the default.
    """
    if not isinstance(data, dict):
        return DEFAULT_SETTINGS

    values = DEFAULT_SETTINGS.to_dict()
    for name in Settings.field_names():
        if name not in data:
            continue
        if _is_valid(name, data[name]):
            values[name] = data[name]
        else:
            logger.warning(f"Ignoring invalid persisted value for '{name}': {data[name]!r}")
    return Settings(**values)


class SettingsStore(QObject):
    """
    Reads and writes the Settings blob.

    Construct one instance in the composition root and pass it to the
    panels that need it.
    """
    # (changed key, new Settings)
    settings_changed = Signal(str, object)

    def __init__(self, backend: Optional[QSettings] = None, key: str = SETTINGS_KEY) -> None:
        super().__init__()
        self._backend = backend if backend is not None else QSettings()
        self._key = key
        self._settings = self.load()

    @property
    def settings(self) -> Settings:
        """Last loaded or saved settings, without touching the backend."""
        return self._settings

    def load(self) -> Settings:
        raw = self._backend.value(self._key, None)
        if raw is None or raw == "":
            self._settings = DEFAULT_SETTINGS
            return self._settings

        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not parse stored settings, using defaults: {e}")
            data = None

        self._settings = settings_from_dict(data)
        return self._settings

    def save(self, partial: Optional[Mapping[str, Any]] = None, **changes: Any) -> Settings:
        """
        Merges `partial` (and/or keyword changes) over the stored settings,
        persists the result and returns it.

        Raises:
            ValueError: If a key is unknown or a value is out of range.
        """
        updates = dict(partial or {})
        updates.update(changes)

        for name, value in updates.items():
            if name not in Settings.field_names():
                raise ValueError(f"Unknown setting '{name}'.")
            if not _is_valid(name, value):
                raise ValueError(f"Invalid value for setting '{name}': {value!r}")

        previous = self.load()
        merged = replace(previous, **updates)

        self._backend.setValue(self._key, json.dumps(merged.to_dict()))
        self._backend.sync()
        self._settings = merged
        logger.debug(f"Settings saved: {merged}")

        for name in Settings.field_names():
            if getattr(previous, name) != getattr(merged, name):
                self.settings_changed.emit(name, merged)

        return merged
