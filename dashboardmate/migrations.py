"""
Settings file migration system.

Each migration function upgrades a settings dict to the schema of its target
version. Register migrations in MIGRATIONS as MigrationStep(target, function),
in ascending order; the registry is checked against INITIAL_VERSION,
CURRENT_SETTINGS_VERSION and APP_VERSION when an engine is built.
"""
from __future__ import annotations

import copy
import logging
import warnings
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from .errors import (
    NewerSettingsVersionWarning,
    RegistryBaselineError,
    RegistryCurrentMismatchError,
    RegistryFutureVersionError,
    RegistryOrderError,
)
from .models import SettingsV1_3, SettingsV1_4
from .version import APP_VERSION
from .versioning import compare_versions, parse_version

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
MigrationFn = Callable[[Document], Document]

INITIAL_VERSION = "1.2.0"
CURRENT_SETTINGS_VERSION = "1.4.0"


@dataclass(frozen=True)
class MigrationStep:
    target_version: str
    transform: MigrationFn
    description: str = ""


# ──────────────────────────────────────────────
# Migration functions
# ──────────────────────────────────────────────
# Each function receives the settings dict of the previous schema and returns
# a new dict in its target schema. Keys a schema does not know about are kept.
# Convention: def _migrate_X_to_Y(data: dict) -> dict

def _upgrade(data: Document, schema: Type) -> Document:
    migrated = copy.deepcopy(data)
    migrated.update(schema.from_dict(data).to_dict())
    return migrated


def _migrate_1_2_to_1_3(data: Document) -> Document:
    """Introduce the ``ai`` and ``schedule`` sections."""
    return _upgrade(data, SettingsV1_3)


def _migrate_1_3_to_1_4(data: Document) -> Document:
    """Add ``notifications.defaultReminderTime``."""
    return _upgrade(data, SettingsV1_4)


# ──────────────────────────────────────────────
# Migration registry
# ──────────────────────────────────────────────
MIGRATIONS: Tuple[MigrationStep, ...] = (
    MigrationStep("1.3.0", _migrate_1_2_to_1_3, "Add ai and schedule settings"),
    MigrationStep("1.4.0", _migrate_1_3_to_1_4, "Add default reminder time"),
)


def validate_migrations(
    migrations: Sequence[MigrationStep],
    initial_version: str,
    current_version: str,
    app_version: str,
) -> None:
    """Raise a :class:`~dashboardmate.errors.MigrationRegistryError` if the registry is inconsistent."""

    for previous, following in zip(migrations, migrations[1:]):
        if compare_versions(following.target_version, previous.target_version) <= 0:
            raise RegistryOrderError(previous.target_version, following.target_version)

    if not migrations:
        # Nothing can move a document past the baseline.
        if compare_versions(current_version, initial_version) != 0:
            raise RegistryCurrentMismatchError(current_version, initial_version)
        return

    first = migrations[0].target_version
    if compare_versions(first, initial_version) <= 0:
        raise RegistryBaselineError(first, initial_version)

    latest = migrations[-1].target_version
    if latest != current_version:
        raise RegistryCurrentMismatchError(current_version, latest)

    for migration in migrations:
        if compare_versions(migration.target_version, app_version) > 0:
            raise RegistryFutureVersionError(migration.target_version, app_version)


class MigrationEngine:
    """Brings settings documents up to the schema the running build expects."""

    def __init__(
        self,
        migrations: Sequence[MigrationStep],
        initial_version: str,
        current_version: str,
        app_version: str,
    ) -> None:
        validate_migrations(migrations, initial_version, current_version, app_version)
        self.migrations: Tuple[MigrationStep, ...] = tuple(migrations)
        self.initial_version = initial_version
        self.current_version = current_version
        self.app_version = app_version

    def document_version(self, document: Document) -> str:
        version = document.get("version")
        if not version:
            return self.initial_version
        return str(version)

    def is_newer_than_app(self, version: str) -> bool:
        return compare_versions(version, self.app_version) > 0

    def pending_migrations(self, version: str) -> List[MigrationStep]:
        steps = [
            step
            for step in self.migrations
            if compare_versions(step.target_version, version) > 0
            and compare_versions(step.target_version, self.app_version) <= 0
        ]
        steps.sort(key=lambda step: parse_version(step.target_version))
        return steps

    def needs_migration(self, document: Document) -> bool:
        version = self.document_version(document)
        return not self.is_newer_than_app(version) and bool(self.pending_migrations(version))

    def migrate(self, document: Document) -> Document:
        """Return a migrated copy of *document*; the argument is left untouched.

        Documents written by a newer release are returned as-is with a
        :class:`NewerSettingsVersionWarning`. Exceptions raised by a
        migration function propagate unchanged.
        """

        settings = copy.deepcopy(document)
        version = self.document_version(settings)
        settings["version"] = version

        if self.is_newer_than_app(version):
            message = (
                f"Settings version ({version}) is newer than app version "
                f"({self.app_version}). Some features may not work correctly."
            )
            logger.warning(message)
            warnings.warn(message, NewerSettingsVersionWarning, stacklevel=2)
            return settings

        steps = self.pending_migrations(version)
        if not steps:
            return settings

        logger.info(
            "Migrating settings from %s through versions: %s",
            version,
            ", ".join(step.target_version for step in steps),
        )
        for step in steps:
            logger.info("Applying migration to version %s", step.target_version)
            settings = step.transform(settings)
            settings["version"] = step.target_version
        logger.info("Settings migration completed successfully")
        return settings


@lru_cache(maxsize=None)
def get_default_engine(app_version: Optional[str] = None) -> MigrationEngine:
    """Build (once per process) the engine for this build's registry."""

    return MigrationEngine(
        MIGRATIONS,
        INITIAL_VERSION,
        CURRENT_SETTINGS_VERSION,
        app_version or APP_VERSION,
    )
