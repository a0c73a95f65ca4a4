"""Service layer for business logic."""

from notifier.services.crypto_client import (
    CredentialCipher,
    CryptographyServiceClient,
    get_crypto_client,
)
from notifier.services.email_service import EmailService, get_email_service
from notifier.services.settings_store import SettingsStore
from notifier.services.smtp_service import MailTransport, SmtpMailTransport

__all__ = [
    "CredentialCipher",
    "CryptographyServiceClient",
    "get_crypto_client",
    "EmailService",
    "get_email_service",
    "SettingsStore",
    "MailTransport",
    "SmtpMailTransport",
]
