"""Email template storage keys and body rendering."""

import logging
from dataclasses import dataclass

from jinja2 import Environment, StrictUndefined, TemplateError, select_autoescape

from notifier.exceptions import InternalException, InvalidArgumentException
from notifier.models.setting import SettingKey
from notifier.schemas.email import EmailType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailTemplateFields:
    """Settings rows holding one email type's template."""

    subject: SettingKey
    body: SettingKey
    redirect_url: SettingKey

    def keys(self) -> tuple[SettingKey, SettingKey, SettingKey]:
        return (self.subject, self.body, self.redirect_url)


@dataclass
class EmailTemplate:
    """A template as read from the settings table."""

    subject: str
    body_template: str
    redirect_url: str


TEMPLATE_FIELDS: dict[EmailType, EmailTemplateFields] = {
    EmailType.EMAIL_VERIFICATION: EmailTemplateFields(
        subject=SettingKey.EMAIL_VERIFICATION_SUBJECT,
        body=SettingKey.EMAIL_VERIFICATION_BODY,
        redirect_url=SettingKey.EMAIL_VERIFICATION_REDIRECT_URL,
    ),
    EmailType.PASSWORD_RESET: EmailTemplateFields(
        subject=SettingKey.PASSWORD_RESET_SUBJECT,
        body=SettingKey.PASSWORD_RESET_BODY,
        redirect_url=SettingKey.PASSWORD_RESET_REDIRECT_URL,
    ),
    EmailType.MFA: EmailTemplateFields(
        subject=SettingKey.MFA_VERIFICATION_SUBJECT,
        body=SettingKey.MFA_VERIFICATION_BODY,
        redirect_url=SettingKey.MFA_VERIFICATION_REDIRECT_URL,
    ),
}


def get_template_fields(email_type: EmailType | str) -> EmailTemplateFields:
    """Resolve the settings rows for an email type.

    Raises InvalidArgumentException for anything outside ``EmailType``.
    """
    try:
        return TEMPLATE_FIELDS[EmailType(email_type)]
    except (ValueError, KeyError) as e:
        raise InvalidArgumentException("Invalid email type") from e


# Body templates come from the database, so they are compiled from strings.
# Undefined variables fail instead of rendering as blanks.
_jinja_env = Environment(
    autoescape=select_autoescape(default_for_string=True, default=True),
    undefined=StrictUndefined,
)


def render_body_template(template: EmailTemplate, name: str = "email") -> str:
    """Render an email body with ``redirect_url`` as its only variable.

    Example body: ``<a href="{{ redirect_url }}">Verify your email</a>``
    """
    if not template.body_template or not template.redirect_url:
        raise InternalException("body template or redirect URL is empty")

    try:
        compiled = _jinja_env.from_string(template.body_template)
        return compiled.render(redirect_url=template.redirect_url)
    except TemplateError as e:
        logger.error(f"Failed to render {name} template: {e}")
        raise InternalException(f"Failed to render {name} template: {e}") from e
