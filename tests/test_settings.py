"""
Tests for the settings store.
"""
import json

import pytest

from spritetab.config import SETTINGS_KEY
from spritetab.model.settings import Settings, SettingsStore, DEFAULT_SETTINGS, settings_from_dict


class TestSettingsFromDict:
    def test_non_dict_gives_defaults(self):
        assert settings_from_dict(None) == DEFAULT_SETTINGS
        assert settings_from_dict([1, 2]) == DEFAULT_SETTINGS

    def test_partial_is_filled_from_defaults(self):
        settings = settings_from_dict({"columns": 7})

        assert settings.columns == 7
        assert settings.show_timestamps is True
        assert settings.compact is False
        assert settings.auto_scroll is True

    def test_invalid_fields_fall_back_individually(self):
        settings = settings_from_dict({"columns": 40, "compact": "yes", "auto_scroll": False})

        assert settings.columns == DEFAULT_SETTINGS.columns
        assert settings.compact is DEFAULT_SETTINGS.compact
        assert settings.auto_scroll is False

    def test_bool_is_not_a_column_count(self):
        assert settings_from_dict({"columns": True}).columns == DEFAULT_SETTINGS.columns

    def test_unknown_keys_ignored(self):
        assert settings_from_dict({"cols": 9}) == DEFAULT_SETTINGS


class TestSettingsStore:
    def test_load_defaults_when_empty(self, store):
        assert store.load() == Settings()

    def test_load_corrupt_blob(self, qapp, qsettings):
        qsettings.setValue(SETTINGS_KEY, "{not json")
        store = SettingsStore(qsettings)

        assert store.load() == DEFAULT_SETTINGS

    def test_load_partial_blob(self, qapp, qsettings):
        qsettings.setValue(SETTINGS_KEY, json.dumps({"compact": True}))
        store = SettingsStore(qsettings)

        settings = store.load()

        assert settings.compact is True
        assert settings.columns == 4

    def test_save_returns_merged(self, store):
        merged = store.save(columns=6)

        assert merged == Settings(columns=6)
        assert store.settings == merged

    def test_save_preserves_earlier_fields(self, store):
        store.save(columns=9)
        store.save({"compact": True})

        settings = store.load()
        assert settings.columns == 9
        assert settings.compact is True

    def test_save_survives_new_instance(self, qapp, tmp_path):
        from PySide6.QtCore import QSettings
        path = str(tmp_path / "persist.ini")

        SettingsStore(QSettings(path, QSettings.Format.IniFormat)).save(auto_scroll=False, columns=2)
        reloaded = SettingsStore(QSettings(path, QSettings.Format.IniFormat)).load()

        assert reloaded.auto_scroll is False
        assert reloaded.columns == 2

    def test_save_unknown_key_raises(self, store):
        with pytest.raises(ValueError, match="Unknown setting"):
            store.save(cols=3)

    def test_save_out_of_range_raises(self, store):
        with pytest.raises(ValueError, match="Invalid value"):
            store.save(columns=13)
        assert store.load() == DEFAULT_SETTINGS

    def test_changed_signal_only_for_changed_keys(self, store):
        seen = []
        store.settings_changed.connect(lambda key, settings: seen.append((key, settings)))

        store.save(columns=4, compact=True)

        assert [key for key, _ in seen] == ["compact"]
        assert seen[0][1].compact is True
