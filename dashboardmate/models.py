"""Typed shapes of the settings document, one per schema version."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict

DEFAULT_REMINDER_MINUTES = 30


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _int(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    # bool is an int subclass; a stray true/false is not a minute count
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


@dataclass
class AiSettings:
    auto_create: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"autoCreate": self.auto_create}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AiSettings":
        return cls(auto_create=_bool(data, "autoCreate", False))


@dataclass
class ScheduleSettings:
    show_weekends: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"showWeekends": self.show_weekends}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleSettings":
        return cls(show_weekends=_bool(data, "showWeekends", True))


@dataclass
class NotificationsV1_3:
    push: bool = False
    email: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotificationsV1_3":
        return cls(push=_bool(data, "push", False), email=_bool(data, "email", False))


@dataclass
class NotificationSettings:
    push: bool = False
    email: bool = False
    default_reminder_time: int = DEFAULT_REMINDER_MINUTES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "push": self.push,
            "email": self.email,
            "defaultReminderTime": self.default_reminder_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotificationSettings":
        return cls(
            push=_bool(data, "push", False),
            email=_bool(data, "email", False),
            default_reminder_time=_int(
                data, "defaultReminderTime", DEFAULT_REMINDER_MINUTES
            ),
        )


@dataclass
class SettingsV1_3:
    """Schema 1.3.0: first versioned shape, adds ``ai`` and ``schedule``."""

    SCHEMA_VERSION: ClassVar[str] = "1.3.0"

    notifications: NotificationsV1_3 = field(default_factory=NotificationsV1_3)
    ai: AiSettings = field(default_factory=AiSettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.SCHEMA_VERSION,
            "notifications": self.notifications.to_dict(),
            "ai": self.ai.to_dict(),
            "schedule": self.schedule.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsV1_3":
        return cls(
            notifications=NotificationsV1_3.from_dict(_section(data, "notifications")),
            ai=AiSettings.from_dict(_section(data, "ai")),
            schedule=ScheduleSettings.from_dict(_section(data, "schedule")),
        )


@dataclass
class SettingsV1_4:
    """Schema 1.4.0: notifications gain a default reminder lead time."""

    SCHEMA_VERSION: ClassVar[str] = "1.4.0"

    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    ai: AiSettings = field(default_factory=AiSettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.SCHEMA_VERSION,
            "notifications": self.notifications.to_dict(),
            "ai": self.ai.to_dict(),
            "schedule": self.schedule.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsV1_4":
        return cls(
            notifications=NotificationSettings.from_dict(_section(data, "notifications")),
            ai=AiSettings.from_dict(_section(data, "ai")),
            schedule=ScheduleSettings.from_dict(_section(data, "schedule")),
        )


Settings = SettingsV1_4
