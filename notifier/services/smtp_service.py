"""SMTP configuration stored in the settings table, and the SMTP transport."""

import logging
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

import aiosmtplib

from notifier.config import get_settings
from notifier.exceptions import InternalException
from notifier.models.setting import SMTP_KEYS, SettingKey
from notifier.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class SmtpConfig:
    """SMTP connection details. ``password`` is the stored ciphertext."""

    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    sender: str = ""

    def __repr__(self) -> str:
        return (
            f"SmtpConfig(host={self.host!r}, port={self.port}, "
            f"user={self.user!r}, sender={self.sender!r})"
        )


def is_smtp_config_complete(config: SmtpConfig) -> bool:
    """Check that every SMTP field is set."""
    return bool(
        config.host
        and config.port
        and config.user
        and config.password
        and config.sender
    )


def parse_port(value: str | None) -> int:
    """Parse a stored port; missing or NULL means unset (0)."""
    if not value:
        return 0
    try:
        return int(value)
    except ValueError as e:
        raise InternalException(f"Invalid SMTP port value: {value!r}") from e


async def load_smtp_config(store: SettingsStore) -> SmtpConfig:
    """Read the SMTP configuration; missing or NULL rows read as empty."""
    values = await store.get_by_names(SMTP_KEYS)
    return SmtpConfig(
        host=values.get(SettingKey.SMTP_HOST) or "",
        port=parse_port(values.get(SettingKey.SMTP_PORT)),
        user=values.get(SettingKey.SMTP_USER) or "",
        password=values.get(SettingKey.SMTP_PASSWORD) or "",
        sender=values.get(SettingKey.SMTP_SENDER) or "",
    )


def build_message(sender: str, to: str, subject: str, html_body: str) -> MIMEMultipart:
    """Compose an HTML email."""
    msg = MIMEMultipart("alternative")
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


class MailTransport(Protocol):
    """Delivers a composed message using the given SMTP connection details."""

    async def send(self, message: MIMEMultipart, config: SmtpConfig, password: str) -> None: ...


class SmtpMailTransport:
    """MailTransport that opens one SMTP connection per message."""

    def __init__(self, timeout: float | None = None, start_tls: bool | None = None):
        self.timeout = timeout if timeout is not None else settings.smtp_timeout
        self.start_tls = start_tls if start_tls is not None else settings.smtp_start_tls

    async def send(self, message: MIMEMultipart, config: SmtpConfig, password: str) -> None:
        """Send via SMTP. Errors from aiosmtplib propagate to the caller."""
        # Port 465 = implicit SSL, anything else may upgrade with STARTTLS
        if config.port == 465:
            tls_kwargs = {"use_tls": True, "start_tls": False}
        else:
            tls_kwargs = {"use_tls": False, "start_tls": self.start_tls}

        await aiosmtplib.send(
            message,
            hostname=config.host,
            port=config.port,
            username=config.user,
            password=password,
            timeout=self.timeout,
            **tls_kwargs,
        )
