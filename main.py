"""Entry point for the DashboardMate desktop application."""
from __future__ import annotations

import logging
import sys
from typing import Any, Dict

from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import (
    QApplication,
    QCheckBox,
    QFormLayout,
    QGroupBox,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from dashboardmate.errors import MigrationRegistryError, SettingsStoreError
from dashboardmate.logging_utils import configure_logging
from dashboardmate.migrations import get_default_engine
from dashboardmate.models import (
    AiSettings,
    NotificationSettings,
    ScheduleSettings,
    Settings,
)
from dashboardmate.storage import AppPaths, LoadResult, SettingsStore
from dashboardmate.version import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)


def create_application() -> QApplication:
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    palette = app.palette()
    palette.setColor(QPalette.ColorRole.Window, QColor("#0f111a"))
    palette.setColor(QPalette.ColorRole.WindowText, QColor("#e8ebf2"))
    palette.setColor(QPalette.ColorRole.Base, QColor("#141724"))
    palette.setColor(QPalette.ColorRole.Text, QColor("#e8ebf2"))
    palette.setColor(QPalette.ColorRole.Button, QColor("#1c2030"))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor("#e8ebf2"))
    palette.setColor(QPalette.ColorRole.Highlight, QColor("#3f7cff"))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#ffffff"))
    app.setPalette(palette)
    app.setStyleSheet(
        "\n".join(
            [
                "QWidget { font-size: 11pt; color: #e8ebf2; }",
                "QMainWindow, QWidget { background-color: #0f111a; }",
                (
                    "QGroupBox { border: 1px solid #1f2336; border-radius: 10px;"
                    " margin-top: 20px; padding: 16px; background: #141724; }"
                ),
                (
                    "QGroupBox::title { subcontrol-origin: margin; left: 18px;"
                    " padding: 0 6px; background: transparent; font-weight: 600; color: #9ca3c7; }"
                ),
                (
                    "QSpinBox { background-color: #141724; border: 1px solid #2a2d3f;"
                    " border-radius: 8px; padding: 6px; }"
                ),
            ]
        )
    )
    return app


class SettingsWindow(QMainWindow):
    def __init__(self, store: SettingsStore, result: LoadResult) -> None:
        super().__init__()
        self.store = store
        self.result = result
        self.document: Dict[str, Any] = dict(result.settings)
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION} - Settings")
        self.resize(520, 480)
        self._init_ui()
        self._populate(Settings.from_dict(self.document))
        if result.newer_than_app:
            # Writing would stamp an older schema over a newer file.
            self.central.setEnabled(False)

    def _init_ui(self) -> None:
        self.central = QWidget()
        layout = QVBoxLayout(self.central)

        notifications = QGroupBox("Notifications")
        form = QFormLayout(notifications)
        self.push_check = QCheckBox("Push notifications")
        self.email_check = QCheckBox("Email notifications")
        self.reminder_spin = QSpinBox()
        self.reminder_spin.setRange(0, 24 * 60)
        self.reminder_spin.setSuffix(" min")
        form.addRow(self.push_check)
        form.addRow(self.email_check)
        form.addRow("Default reminder", self.reminder_spin)
        layout.addWidget(notifications)

        ai = QGroupBox("AI")
        ai_layout = QVBoxLayout(ai)
        self.auto_create_check = QCheckBox("Create tasks automatically")
        ai_layout.addWidget(self.auto_create_check)
        layout.addWidget(ai)

        schedule = QGroupBox("Schedule")
        schedule_layout = QVBoxLayout(schedule)
        self.weekends_check = QCheckBox("Show weekends")
        schedule_layout.addWidget(self.weekends_check)
        layout.addWidget(schedule)

        self.location_label = QLabel(f"Settings file: {self.store.path}")
        self.location_label.setWordWrap(True)
        layout.addWidget(self.location_label)
        layout.addStretch(1)
        self.setCentralWidget(self.central)

    def _populate(self, settings: Settings) -> None:
        self.push_check.setChecked(settings.notifications.push)
        self.email_check.setChecked(settings.notifications.email)
        self.reminder_spin.setValue(settings.notifications.default_reminder_time)
        self.auto_create_check.setChecked(settings.ai.auto_create)
        self.weekends_check.setChecked(settings.schedule.show_weekends)
        for check in (
            self.push_check,
            self.email_check,
            self.auto_create_check,
            self.weekends_check,
        ):
            check.toggled.connect(self._save)
        self.reminder_spin.valueChanged.connect(self._save)

    def _collect(self) -> Settings:
        return Settings(
            notifications=NotificationSettings(
                push=self.push_check.isChecked(),
                email=self.email_check.isChecked(),
                default_reminder_time=self.reminder_spin.value(),
            ),
            ai=AiSettings(auto_create=self.auto_create_check.isChecked()),
            schedule=ScheduleSettings(show_weekends=self.weekends_check.isChecked()),
        )

    def _save(self) -> None:
        self.document.update(self._collect().to_dict())
        try:
            self.store.save(self.document)
        except SettingsStoreError as exc:
            QMessageBox.critical(self, "Error", str(exc))

    def notify_load_result(self) -> None:
        if self.result.created:
            QMessageBox.information(
                self, "Settings Initialized", "Created settings file with default values."
            )
        elif self.result.reset:
            QMessageBox.warning(
                self,
                "Settings Recovery",
                "Your settings file was corrupted and has been reset to defaults. "
                f"Previous settings were backed up to {self.result.backup_path}.",
            )
        elif self.result.newer_than_app:
            QMessageBox.warning(
                self,
                "Newer Settings",
                f"Your settings were saved by a newer version of {APP_NAME}. "
                "They are shown read-only and some features may not work correctly.",
            )


def main() -> int:
    paths = AppPaths.default()
    paths.ensure()
    configure_logging(paths.log_file)
    logging.info("Starting %s %s", APP_NAME, APP_VERSION)
    app = create_application()
    try:
        engine = get_default_engine()
    except MigrationRegistryError as exc:
        logger.critical("Invalid settings migration registry: %s", exc)
        QMessageBox.critical(None, "Startup failed", str(exc))
        return 1
    store = SettingsStore(paths, engine)
    try:
        result = store.load()
    except SettingsStoreError as exc:
        QMessageBox.critical(None, "Settings Error", str(exc))
        return 1
    window = SettingsWindow(store, result)
    window.show()
    window.notify_load_result()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
