"""Tests for email template field resolution and rendering."""

import pytest

from notifier.exceptions import InternalException, InvalidArgumentException
from notifier.models import SettingKey
from notifier.schemas.email import EmailType
from notifier.services.template_service import (
    EmailTemplate,
    get_template_fields,
    render_body_template,
)


class TestGetTemplateFields:
    """Tests for mapping email types to settings rows."""

    def test_email_verification_fields(self):
        fields = get_template_fields(EmailType.EMAIL_VERIFICATION)

        assert fields.keys() == (
            SettingKey.EMAIL_VERIFICATION_SUBJECT,
            SettingKey.EMAIL_VERIFICATION_BODY,
            SettingKey.EMAIL_VERIFICATION_REDIRECT_URL,
        )

    def test_password_reset_fields(self):
        fields = get_template_fields(EmailType.PASSWORD_RESET)

        assert fields.subject.value == "PASSWORD_RESET_SUBJECT"
        assert fields.body.value == "PASSWORD_RESET_BODY"
        assert fields.redirect_url.value == "PASSWORD_RESET_REDIRECT_URL"

    def test_mfa_fields(self):
        fields = get_template_fields(EmailType.MFA)

        assert fields.subject.value == "MFA_VERIFICATION_SUBJECT"
        assert fields.body.value == "MFA_VERIFICATION_BODY"
        assert fields.redirect_url.value == "MFA_VERIFICATION_REDIRECT_URL"

    def test_accepts_type_name(self):
        assert get_template_fields("PASSWORD_RESET") == get_template_fields(EmailType.PASSWORD_RESET)

    @pytest.mark.parametrize("email_type", ["WELCOME", "password_reset", "", None, 3])
    def test_unknown_type_is_rejected(self, email_type):
        with pytest.raises(InvalidArgumentException, match="Invalid email type"):
            get_template_fields(email_type)

    def test_every_type_has_distinct_rows(self):
        keys = [key for email_type in EmailType for key in get_template_fields(email_type).keys()]
        assert len(keys) == len(set(keys)) == 9


class TestRenderBodyTemplate:
    """Tests for rendering stored body templates."""

    def test_substitutes_redirect_url(self):
        template = EmailTemplate(
            subject="Reset",
            body_template='<a href="{{ redirect_url }}">Reset password</a>',
            redirect_url="https://app/reset?code=tok123",
        )

        body = render_body_template(template)

        assert body == '<a href="https://app/reset?code=tok123">Reset password</a>'

    def test_empty_body_fails(self):
        template = EmailTemplate(subject="s", body_template="", redirect_url="https://app")

        with pytest.raises(InternalException, match="empty"):
            render_body_template(template)

    def test_empty_redirect_url_fails(self):
        template = EmailTemplate(subject="s", body_template="{{ redirect_url }}", redirect_url="")

        with pytest.raises(InternalException, match="empty"):
            render_body_template(template)

    def test_malformed_template_fails(self):
        template = EmailTemplate(subject="s", body_template="{{ redirect_url", redirect_url="https://app")

        with pytest.raises(InternalException):
            render_body_template(template)

    def test_unknown_variable_fails(self):
        template = EmailTemplate(subject="s", body_template="Hi {{ user_name }}", redirect_url="https://app")

        with pytest.raises(InternalException):
            render_body_template(template)

    def test_template_without_slot_renders_verbatim(self):
        template = EmailTemplate(subject="s", body_template="<p>Welcome</p>", redirect_url="https://app")

        assert render_body_template(template) == "<p>Welcome</p>"

    def test_redirect_url_is_html_escaped(self):
        template = EmailTemplate(
            subject="s",
            body_template='<a href="{{ redirect_url }}">x</a>',
            redirect_url='https://app/"><script>',
        )

        body = render_body_template(template)

        assert "<script>" not in body
        assert "&#34;&gt;&lt;script&gt;" in body
