"""Email sending and settings-management schemas."""

import enum

from pydantic import BaseModel, EmailStr, Field


class EmailType(str, enum.Enum):
    """Kinds of transactional email, each backed by its own template."""

    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PASSWORD_RESET = "PASSWORD_RESET"
    MFA = "MFA"


class SendEmailRequest(BaseModel):
    """Send a verification email."""

    to: EmailStr


class SendTokenEmailRequest(BaseModel):
    """Send an email whose link carries a one-time token (reset, MFA)."""

    to: EmailStr
    token: str = Field(..., min_length=1, max_length=512)


class SmtpCredentialsRequest(BaseModel):
    """SMTP connection details. The password is encrypted before storage."""

    # Blank values are accepted so an operator can clear the configuration
    host: str = Field(..., max_length=255)
    port: int = Field(..., ge=0, le=65535)
    username: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)
    sender: str = Field(..., max_length=255)


class SmtpCredentialsResponse(BaseModel):
    """Stored SMTP connection details; never includes the password."""

    host: str
    port: int
    username: str
    sender: str


class EmailTemplateRequest(BaseModel):
    """Replace the subject, body and redirect URL of one email type."""

    # Kept as a plain string so unknown types reach the field resolver
    email_type: str
    subject: str
    body: str
    redirect_url: str


class EmailTemplateResponse(BaseModel):
    """Stored template of one email type."""

    subject: str
    body: str
    redirect_url: str
