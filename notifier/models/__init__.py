"""SQLAlchemy models for the email service."""

from notifier.models.base import Base, TimestampMixin
from notifier.models.setting import SMTP_KEYS, Setting, SettingKey

__all__ = [
    "Base",
    "TimestampMixin",
    "Setting",
    "SettingKey",
    "SMTP_KEYS",
]
