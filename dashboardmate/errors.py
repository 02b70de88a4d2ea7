"""Exceptions and warnings raised by the settings layer."""
from __future__ import annotations


class MigrationRegistryError(ValueError):
    """The static migration registry is inconsistent with the running build."""


class RegistryOrderError(MigrationRegistryError):
    def __init__(self, previous: str, following: str) -> None:
        self.previous = previous
        self.following = following
        super().__init__(
            f"Migrations must be in ascending order. Found {previous} followed by {following}"
        )


class RegistryBaselineError(MigrationRegistryError):
    def __init__(self, first: str, initial: str) -> None:
        self.first = first
        self.initial = initial
        super().__init__(
            f"First migration version ({first}) must be greater than INITIAL_VERSION ({initial})"
        )


class RegistryCurrentMismatchError(MigrationRegistryError):
    def __init__(self, current: str, latest: str) -> None:
        self.current = current
        self.latest = latest
        super().__init__(
            f"CURRENT_SETTINGS_VERSION ({current}) must match latest migration version ({latest})"
        )


class RegistryFutureVersionError(MigrationRegistryError):
    def __init__(self, migration: str, app: str) -> None:
        self.migration = migration
        self.app = app
        super().__init__(
            f"Migration version {migration} is higher than current app version {app}"
        )


class SettingsStoreError(Exception):
    """Base class for settings file access failures."""

    def __init__(self, path, message: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class SettingsReadError(SettingsStoreError):
    pass


class SettingsWriteError(SettingsStoreError):
    pass


class NewerSettingsVersionWarning(UserWarning):
    """Settings were written by a newer release than the one running."""
