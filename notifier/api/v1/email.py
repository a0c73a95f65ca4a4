"""Email RPC endpoints called by other backend services."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notifier.database import get_db
from notifier.schemas.common import APIResponse, MessageResponse
from notifier.schemas.email import (
    EmailTemplateRequest,
    EmailTemplateResponse,
    SendEmailRequest,
    SendTokenEmailRequest,
    SmtpCredentialsRequest,
    SmtpCredentialsResponse,
)
from notifier.services.email_service import EmailService, get_email_service

router = APIRouter()


def _message(message: str) -> APIResponse[MessageResponse]:
    return APIResponse(data=MessageResponse(message=message), message=message)


@router.post(
    "/send-verify-email",
    response_model=APIResponse[MessageResponse],
    operation_id="SendVerifyEmailEmail",
)
async def send_verify_email(
    request: SendEmailRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Send the account verification email.

    A delivery failure is reported in the message, not as an error.
    """
    result = await email_service.send_verify_email(db, str(request.to))
    return _message(result)


@router.post(
    "/send-password-reset-email",
    response_model=APIResponse[MessageResponse],
    operation_id="SendPasswordResetEmail",
)
async def send_password_reset_email(
    request: SendTokenEmailRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Send the password reset email with the token in the redirect link."""
    result = await email_service.send_password_reset_email(db, str(request.to), request.token)
    return _message(result)


@router.post(
    "/send-mfa-email",
    response_model=APIResponse[MessageResponse],
    operation_id="SendMfaEmail",
)
async def send_mfa_email(
    request: SendTokenEmailRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Send a multi-factor verification email."""
    result = await email_service.send_mfa_email(db, str(request.to), request.token)
    return _message(result)


@router.put(
    "/smtp-credentials",
    response_model=APIResponse[MessageResponse],
    operation_id="SetSmtpCredentials",
)
async def set_smtp_credentials(
    request: SmtpCredentialsRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Store SMTP credentials; the password is encrypted first."""
    result = await email_service.set_smtp_credentials(
        db,
        host=request.host,
        port=request.port,
        username=request.username,
        password=request.password,
        sender=request.sender,
    )
    return _message(result)


@router.get(
    "/smtp-credentials",
    response_model=APIResponse[SmtpCredentialsResponse],
    operation_id="GetSmtpCredentials",
)
async def get_smtp_credentials(
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Get the stored SMTP settings (the password is never returned)."""
    credentials = await email_service.get_smtp_credentials(db)
    return APIResponse(data=credentials)


@router.put(
    "/templates",
    response_model=APIResponse[MessageResponse],
    operation_id="SetEmailTemplate",
)
async def set_email_template(
    request: EmailTemplateRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Replace one email type's subject, body and redirect URL."""
    result = await email_service.set_email_template(
        db,
        email_type=request.email_type,
        subject=request.subject,
        body=request.body,
        redirect_url=request.redirect_url,
    )
    return _message(result)


@router.get(
    "/templates/{email_type}",
    response_model=APIResponse[EmailTemplateResponse],
    operation_id="GetEmailTemplate",
)
async def get_email_template(
    email_type: str,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Get one email type's stored template."""
    template = await email_service.get_email_template(db, email_type)
    return APIResponse(data=template)
