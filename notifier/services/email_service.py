"""Transactional email sending and email settings management.

SMTP configuration and email templates live in the ``settings`` table. The
SMTP password is stored as ciphertext and decrypted through the
cryptography service for each send.
"""

import enum
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from notifier.exceptions import FailedPreconditionException, InternalException
from notifier.models.setting import SettingKey
from notifier.schemas.email import (
    EmailTemplateResponse,
    EmailType,
    SmtpCredentialsResponse,
)
from notifier.services.crypto_client import CredentialCipher, get_crypto_client
from notifier.services.settings_store import SettingsStore
from notifier.services.smtp_service import (
    MailTransport,
    SmtpMailTransport,
    build_message,
    is_smtp_config_complete,
    load_smtp_config,
)
from notifier.services.template_service import (
    EmailTemplate,
    get_template_fields,
    render_body_template,
)

logger = logging.getLogger(__name__)

SENT_MESSAGE = "Sent an email successfully!"
SEND_FAILED_MESSAGE = "Failed to send email!"
SMTP_NOT_SET_MESSAGE = "SMTP configuration is not set!"
SMTP_CREDENTIALS_SET_MESSAGE = "SMTP credentials set successfully!"
EMAIL_TEMPLATE_SET_MESSAGE = "Email template set successfully!"


class DispatchFailurePolicy(str, enum.Enum):
    """What a send flow does when the SMTP server rejects or is unreachable."""

    SOFT = "soft"  # succeed with SEND_FAILED_MESSAGE
    FATAL = "fatal"  # raise InternalException


# Verification emails have always reported delivery failures as a normal
# response while reset and MFA emails fail the request.
DISPATCH_FAILURE_POLICIES: dict[EmailType, DispatchFailurePolicy] = {
    EmailType.EMAIL_VERIFICATION: DispatchFailurePolicy.SOFT,
    EmailType.PASSWORD_RESET: DispatchFailurePolicy.FATAL,
    EmailType.MFA: DispatchFailurePolicy.FATAL,
}

_TEMPLATE_NAMES = {
    EmailType.EMAIL_VERIFICATION: "verify-email",
    EmailType.PASSWORD_RESET: "password-reset",
    EmailType.MFA: "mfa",
}


async def load_email_template(store: SettingsStore, email_type: EmailType) -> EmailTemplate:
    """Read the template used for sending; a NULL field is an error."""
    fields = get_template_fields(email_type)
    values = await store.get_by_names(fields.keys())

    for key in fields.keys():
        if key in values and values[key] is None:
            raise InternalException(f"value for {key.value} is null")

    return EmailTemplate(
        subject=values.get(fields.subject) or "",
        body_template=values.get(fields.body) or "",
        redirect_url=values.get(fields.redirect_url) or "",
    )


class EmailService:
    """Service for sending transactional emails and managing their settings."""

    def __init__(self, cipher: CredentialCipher, transport: MailTransport):
        """Initialize the email service with its collaborators."""
        self.cipher = cipher
        self.transport = transport

    async def _send(
        self,
        db: AsyncSession,
        email_type: EmailType,
        to: str,
        token: str | None = None,
    ) -> str:
        """Run the send sequence for one email type.

        Returns the message reported to the caller. Delivery failures are
        handled according to ``DISPATCH_FAILURE_POLICIES``.
        """
        store = SettingsStore(db)

        smtp_config = await load_smtp_config(store)
        if not is_smtp_config_complete(smtp_config):
            raise FailedPreconditionException(SMTP_NOT_SET_MESSAGE)

        password = await self.cipher.decrypt(smtp_config.password)

        template = await load_email_template(store, email_type)
        if token is not None:
            template.redirect_url = f"{template.redirect_url}?code={token}"

        html_body = render_body_template(template, _TEMPLATE_NAMES[email_type])
        message = build_message(smtp_config.sender, to, template.subject, html_body)

        try:
            await self.transport.send(message, smtp_config, password)
        except Exception as e:
            logger.error(f"Failed to send an email to {to} with error {e}")
            if DISPATCH_FAILURE_POLICIES[email_type] is DispatchFailurePolicy.SOFT:
                return SEND_FAILED_MESSAGE
            raise InternalException(str(e) or SEND_FAILED_MESSAGE) from e

        logger.info(f"Sent {email_type.value} email to {to}")
        return SENT_MESSAGE

    async def send_verify_email(self, db: AsyncSession, to: str) -> str:
        """Send the account verification email."""
        return await self._send(db, EmailType.EMAIL_VERIFICATION, to)

    async def send_password_reset_email(self, db: AsyncSession, to: str, token: str) -> str:
        """Send the password reset email; the token is appended as ``?code=``."""
        return await self._send(db, EmailType.PASSWORD_RESET, to, token=token)

    async def send_mfa_email(self, db: AsyncSession, to: str, token: str) -> str:
        """Send a multi-factor verification email; the code is appended as ``?code=``."""
        return await self._send(db, EmailType.MFA, to, token=token)

    async def set_smtp_credentials(
        self,
        db: AsyncSession,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
    ) -> str:
        """Encrypt the password and store all SMTP fields in one transaction."""
        ciphertext = await self.cipher.encrypt(password)

        store = SettingsStore(db)
        async with store.transaction() as tx:
            await tx.set(SettingKey.SMTP_HOST, host)
            await tx.set(SettingKey.SMTP_PORT, str(port))
            await tx.set(SettingKey.SMTP_USER, username)
            await tx.set(SettingKey.SMTP_PASSWORD, ciphertext)
            await tx.set(SettingKey.SMTP_SENDER, sender)

        logger.info(f"SMTP credentials updated (host={host}, port={port}, user={username})")
        return SMTP_CREDENTIALS_SET_MESSAGE

    async def get_smtp_credentials(self, db: AsyncSession) -> SmtpCredentialsResponse:
        """Return the stored SMTP settings without the password."""
        config = await load_smtp_config(SettingsStore(db))
        return SmtpCredentialsResponse(
            host=config.host,
            port=config.port,
            username=config.user,
            sender=config.sender,
        )

    async def set_email_template(
        self,
        db: AsyncSession,
        email_type: EmailType | str,
        subject: str,
        body: str,
        redirect_url: str,
    ) -> str:
        """Store the subject, body and redirect URL of one email type."""
        fields = get_template_fields(email_type)

        store = SettingsStore(db)
        async with store.transaction() as tx:
            await tx.set(fields.subject, subject)
            await tx.set(fields.body, body)
            await tx.set(fields.redirect_url, redirect_url)

        logger.info(f"Email template updated for {EmailType(email_type).value}")
        return EMAIL_TEMPLATE_SET_MESSAGE

    async def get_email_template(
        self, db: AsyncSession, email_type: EmailType | str
    ) -> EmailTemplateResponse:
        """Return the stored template of one email type (NULL reads as empty)."""
        fields = get_template_fields(email_type)
        values = await SettingsStore(db).get_by_names(fields.keys())
        return EmailTemplateResponse(
            subject=values.get(fields.subject) or "",
            body=values.get(fields.body) or "",
            redirect_url=values.get(fields.redirect_url) or "",
        )


# Singleton instance
_email_service: EmailService | None = None


async def get_email_service() -> EmailService:
    """Get the email service singleton.

    Async so FastAPI resolves it on the event loop, where creation cannot
    run concurrently.
    """
    global _email_service
    if _email_service is None:
        _email_service = EmailService(
            cipher=get_crypto_client(),
            transport=SmtpMailTransport(),
        )
    return _email_service
