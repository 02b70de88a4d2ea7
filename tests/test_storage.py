import json
import logging
import re
from pathlib import Path

import pytest

from dashboardmate.errors import (
    NewerSettingsVersionWarning,
    SettingsReadError,
    SettingsStoreError,
    SettingsWriteError,
)
from dashboardmate.migrations import CURRENT_SETTINGS_VERSION, MigrationEngine, MigrationStep
from dashboardmate.storage import AppPaths, SettingsStore, default_settings


@pytest.fixture
def paths(tmp_path):
    return AppPaths(tmp_path / "data")


@pytest.fixture
def store(paths):
    return SettingsStore(paths)


def _write(store, payload):
    store.path.write_text(payload, encoding="utf-8")


def _read(store):
    return json.loads(store.path.read_text(encoding="utf-8"))


def test_store_creates_data_directories(paths, store):
    assert paths.root.is_dir()
    assert paths.backups.is_dir()
    assert paths.logs.is_dir()


def test_default_settings_match_current_version():
    settings = default_settings()
    assert settings["version"] == CURRENT_SETTINGS_VERSION
    assert settings["notifications"]["defaultReminderTime"] == 30


def test_first_run_writes_defaults(store):
    result = store.load()
    assert result.created
    assert not result.reset
    assert result.settings == default_settings()
    assert _read(store) == default_settings()


def test_corrupt_file_is_backed_up_and_reset(store, paths):
    _write(store, "{not json")
    result = store.load()
    assert result.reset
    assert result.settings == default_settings()
    assert _read(store) == default_settings()
    assert result.backup_path.parent == paths.backups
    assert re.fullmatch(r"settings-corrupt-\d{8}-\d{6}\.json", result.backup_path.name)
    assert result.backup_path.read_text(encoding="utf-8") == "{not json"


def test_non_object_json_is_treated_as_corrupt(store):
    _write(store, "[]")
    result = store.load()
    assert result.reset
    assert _read(store) == default_settings()


def test_repeated_backups_do_not_overwrite_each_other(store, paths):
    _write(store, "first")
    store.backup_corrupt()
    _write(store, "second")
    store.backup_corrupt()
    contents = sorted(p.read_text(encoding="utf-8") for p in paths.backups.iterdir())
    assert contents == ["first", "second"]


def test_legacy_settings_are_migrated_and_saved(store):
    _write(store, json.dumps({"notifications": {"push": True}}))
    result = store.load()
    assert result.migrated
    assert result.settings["version"] == CURRENT_SETTINGS_VERSION
    assert result.settings["notifications"] == {
        "push": True,
        "email": False,
        "defaultReminderTime": 30,
    }
    assert _read(store) == result.settings


def test_current_settings_are_not_rewritten(store):
    raw = json.dumps(default_settings())
    _write(store, raw)
    result = store.load()
    assert not result.migrated
    assert store.path.read_text(encoding="utf-8") == raw


def test_newer_settings_are_left_alone(store):
    raw = json.dumps({"version": "99.0.0", "notifications": {"push": True}})
    _write(store, raw)
    with pytest.warns(NewerSettingsVersionWarning):
        result = store.load()
    assert result.newer_than_app
    assert not result.migrated
    assert result.settings == json.loads(raw)
    assert store.path.read_text(encoding="utf-8") == raw


def test_failed_migration_is_logged_and_reraised(paths, caplog):
    def broken(data):
        raise KeyError("missing")

    engine = MigrationEngine([MigrationStep("1.1.0", broken)], "1.0.0", "1.1.0", "1.1.0")
    store = SettingsStore(paths, engine)
    _write(store, "{}")
    with caplog.at_level(logging.ERROR, logger="dashboardmate.storage"):
        with pytest.raises(KeyError):
            store.load()
    assert "Failed to migrate settings" in caplog.text
    assert store.path.read_text(encoding="utf-8") == "{}"


def test_unreadable_settings_raise_read_error(store):
    store.path.mkdir()
    with pytest.raises(SettingsReadError) as excinfo:
        store.load_raw()
    assert isinstance(excinfo.value, SettingsStoreError)
    assert excinfo.value.path == store.path


def test_save_replaces_file_without_leftovers(store, paths):
    store.save({"version": "1.4.0"})
    store.save({"version": "1.4.0", "theme": "dark"})
    assert _read(store) == {"version": "1.4.0", "theme": "dark"}
    assert [p.name for p in paths.root.glob("*.tmp")] == []


def test_default_paths_honour_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DASHBOARDMATE_HOME", str(tmp_path / "custom"))
    paths = AppPaths.default()
    assert paths.settings == tmp_path / "custom" / "settings.json"
    assert paths.log_file.parent == tmp_path / "custom" / "logs"


def test_version_with_non_decimal_digits_is_migrated(store):
    _write(store, json.dumps({"version": "1.³.0", "notifications": {"push": True}}))
    result = store.load()
    assert result.migrated
    assert result.settings["version"] == CURRENT_SETTINGS_VERSION
    assert result.settings["notifications"]["push"] is True
    assert _read(store) == result.settings


def test_failed_replace_removes_temp_file(store, paths, monkeypatch):
    def refuse(self, target):
        raise PermissionError("locked")

    monkeypatch.setattr(Path, "replace", refuse)
    with pytest.raises(SettingsWriteError):
        store.save({"version": "1.4.0"})
    assert list(paths.root.glob("*.tmp")) == []
    assert not store.path.exists()
