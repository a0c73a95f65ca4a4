"""Setting model: the name/value table holding SMTP config and email templates."""

import enum

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notifier.models.base import Base, TimestampMixin


class SettingKey(str, enum.Enum):
    """Every row name the service reads or writes."""

    SMTP_HOST = "SMTP_HOST"
    SMTP_PORT = "SMTP_PORT"
    SMTP_USER = "SMTP_USER"
    SMTP_PASSWORD = "SMTP_PASSWORD"
    SMTP_SENDER = "SMTP_SENDER"

    EMAIL_VERIFICATION_SUBJECT = "EMAIL_VERIFICATION_SUBJECT"
    EMAIL_VERIFICATION_BODY = "EMAIL_VERIFICATION_BODY"
    EMAIL_VERIFICATION_REDIRECT_URL = "EMAIL_VERIFICATION_REDIRECT_URL"

    PASSWORD_RESET_SUBJECT = "PASSWORD_RESET_SUBJECT"
    PASSWORD_RESET_BODY = "PASSWORD_RESET_BODY"
    PASSWORD_RESET_REDIRECT_URL = "PASSWORD_RESET_REDIRECT_URL"

    MFA_VERIFICATION_SUBJECT = "MFA_VERIFICATION_SUBJECT"
    MFA_VERIFICATION_BODY = "MFA_VERIFICATION_BODY"
    MFA_VERIFICATION_REDIRECT_URL = "MFA_VERIFICATION_REDIRECT_URL"


SMTP_KEYS = (
    SettingKey.SMTP_HOST,
    SettingKey.SMTP_PORT,
    SettingKey.SMTP_USER,
    SettingKey.SMTP_PASSWORD,
    SettingKey.SMTP_SENDER,
)


class Setting(Base, TimestampMixin):
    """Key-value row for service-wide settings.

    Rows are seeded at deployment with NULL values and updated at runtime
    through the SMTP credential and email template operations.
    """

    __tablename__ = "settings"

    name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    value: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )
