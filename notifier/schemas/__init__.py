"""Pydantic schemas for request/response validation."""

from notifier.schemas.common import APIResponse, MessageResponse
from notifier.schemas.email import (
    EmailTemplateRequest,
    EmailTemplateResponse,
    EmailType,
    SendEmailRequest,
    SendTokenEmailRequest,
    SmtpCredentialsRequest,
    SmtpCredentialsResponse,
)

__all__ = [
    "APIResponse",
    "MessageResponse",
    "EmailType",
    "SendEmailRequest",
    "SendTokenEmailRequest",
    "SmtpCredentialsRequest",
    "SmtpCredentialsResponse",
    "EmailTemplateRequest",
    "EmailTemplateResponse",
]
