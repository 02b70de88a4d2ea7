"""Persistence layer for the settings document."""
from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import SettingsReadError, SettingsWriteError
from .migrations import MigrationEngine, get_default_engine
from .models import Settings

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "DASHBOARDMATE_HOME"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def default_settings() -> Dict[str, Any]:
    """Return a fully populated settings document at the current schema version."""
    return Settings().to_dict()


@dataclass
class AppPaths:
    root: Path

    @classmethod
    def default(cls) -> "AppPaths":
        override = os.environ.get(HOME_ENV_VAR)
        return cls(Path(override) if override else Path.home() / ".dashboardmate")

    @property
    def settings(self) -> Path:
        return self.root / "settings.json"

    @property
    def backups(self) -> Path:
        return self.root / "backups"

    @property
    def logs(self) -> Path:
        return self.root / "logs"

    @property
    def log_file(self) -> Path:
        return self.logs / "dashboardmate.log"

    def ensure(self) -> None:
        for directory in (self.root, self.backups, self.logs):
            directory.mkdir(parents=True, exist_ok=True)


@dataclass
class LoadResult:
    settings: Dict[str, Any] = field(default_factory=default_settings)
    created: bool = False
    reset: bool = False
    migrated: bool = False
    newer_than_app: bool = False
    backup_path: Optional[Path] = None


class SettingsStore:
    """Reads, migrates and writes the settings file for one data directory.

    Callers must not share a settings file between stores; the
    read-migrate-write sequence in :meth:`load` assumes a single writer.
    """

    def __init__(self, paths: AppPaths, engine: Optional[MigrationEngine] = None):
        self.paths = paths
        self.engine = engine or get_default_engine()
        self.paths.ensure()

    @property
    def path(self) -> Path:
        return self.paths.settings

    # ------------------------------------------------------------------
    # Raw file access
    # ------------------------------------------------------------------
    def exists(self) -> bool:
        return self.path.exists()

    def load_raw(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to load settings: %s", exc)
            raise SettingsReadError(self.path, "Could not read settings") from exc

    def save_raw(self, data: str) -> None:
        temp_path = self.path.with_suffix(".json.tmp")
        try:
            temp_path.write_text(data, encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as exc:
            logger.error("Failed to save settings: %s", exc)
            temp_path.unlink(missing_ok=True)
            raise SettingsWriteError(self.path, "Could not write settings") from exc

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------
    def save(self, settings: Dict[str, Any]) -> None:
        self.save_raw(json.dumps(settings, indent=2))

    def create_default(self) -> Dict[str, Any]:
        settings = default_settings()
        self.save(settings)
        logger.info("Created settings file with default values at %s", self.path)
        return settings

    def backup_corrupt(self) -> Path:
        stamp = datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
        backup_path = self.paths.backups / f"settings-corrupt-{stamp}.json"
        suffix = 1
        while backup_path.exists():
            backup_path = self.paths.backups / f"settings-corrupt-{stamp}-{suffix}.json"
            suffix += 1
        try:
            shutil.copy2(self.path, backup_path)
        except OSError as exc:
            raise SettingsWriteError(backup_path, "Could not back up settings") from exc
        logger.warning("Backed up corrupted settings to %s", backup_path)
        return backup_path

    def _parse(self, raw: str) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Settings file is corrupted: %s", exc)
            return None
        if not isinstance(data, dict):
            logger.error("Settings file does not contain a JSON object")
            return None
        return data

    def load(self) -> LoadResult:
        if not self.exists():
            return LoadResult(settings=self.create_default(), created=True)

        data = self._parse(self.load_raw())
        if data is None:
            backup_path = self.backup_corrupt()
            return LoadResult(
                settings=self.create_default(), reset=True, backup_path=backup_path
            )

        version = self.engine.document_version(data)
        if self.engine.is_newer_than_app(version):
            # The engine warns; the flag lets the UI tell the user.
            return LoadResult(settings=self._migrate(data), newer_than_app=True)

        migrated = self._migrate(data)
        changed = migrated != data
        if changed:
            self.save(migrated)
        return LoadResult(settings=migrated, migrated=changed)

    def _migrate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self.engine.migrate(data)
        except Exception:
            logger.exception("Failed to migrate settings from %s", self.path)
            raise
