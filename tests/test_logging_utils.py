import logging
from logging import handlers

import pytest

from dashboardmate.logging_utils import configure_logging
from dashboardmate.migrations import MIGRATIONS, MigrationEngine
from dashboardmate.errors import NewerSettingsVersionWarning


@pytest.fixture
def log_handler(tmp_path):
    log_path = tmp_path / "logs" / "dashboardmate.log"
    root = logging.getLogger()
    previous_level = root.level
    handler = configure_logging(log_path)
    yield handler, log_path
    root.removeHandler(handler)
    handler.close()
    root.setLevel(previous_level)


def test_configure_logging_attaches_rotating_file_handler(log_handler):
    handler, log_path = log_handler
    assert log_path.parent.is_dir()
    assert isinstance(handler, handlers.RotatingFileHandler)
    assert handler in logging.getLogger().handlers
    assert handler.maxBytes == 512000
    assert handler.backupCount == 3


def test_records_reach_the_log_file(log_handler):
    handler, log_path = log_handler
    logging.getLogger("dashboardmate.test").info("settings loaded")
    handler.flush()
    assert "INFO dashboardmate.test settings loaded" in log_path.read_text(encoding="utf-8")


def test_newer_settings_are_logged_once(log_handler):
    handler, log_path = log_handler
    engine = MigrationEngine(MIGRATIONS, "1.2.0", "1.4.0", "1.4.0")
    with pytest.warns(NewerSettingsVersionWarning):
        engine.migrate({"version": "99.0.0"})
    handler.flush()
    lines = [
        line
        for line in log_path.read_text(encoding="utf-8").splitlines()
        if "99.0.0" in line
    ]
    assert len(lines) == 1
    assert "WARNING dashboardmate.migrations" in lines[0]
