"""DashboardMate settings schema versioning and migration."""
from .migrations import (
    CURRENT_SETTINGS_VERSION,
    INITIAL_VERSION,
    MIGRATIONS,
    MigrationEngine,
    MigrationStep,
    get_default_engine,
    validate_migrations,
)
from .version import APP_VERSION
from .versioning import Version, compare_versions, parse_version

__all__ = [
    "APP_VERSION",
    "CURRENT_SETTINGS_VERSION",
    "INITIAL_VERSION",
    "MIGRATIONS",
    "MigrationEngine",
    "MigrationStep",
    "Version",
    "compare_versions",
    "get_default_engine",
    "parse_version",
    "validate_migrations",
]
