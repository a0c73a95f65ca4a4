"""
Test configuration and fixtures.

Tests run against an in-memory SQLite database with fake cryptography and
mail transport collaborators, so nothing touches the network.
"""

import os
from collections.abc import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "development")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notifier.database import get_db
from notifier.exceptions import InternalException
from notifier.main import create_app
from notifier.models import Base, Setting, SettingKey
from notifier.services.email_service import EmailService, get_email_service


class FakeCipher:
    """CredentialCipher that prefixes instead of encrypting."""

    def __init__(self):
        self.fail = False
        self.encrypted: list[str] = []
        self.decrypted: list[str] = []

    async def encrypt(self, plaintext: str) -> str:
        if self.fail:
            raise InternalException("Cryptography service encrypt failed")
        self.encrypted.append(plaintext)
        return f"enc:{plaintext}"

    async def decrypt(self, ciphertext: str) -> str:
        if self.fail:
            raise InternalException("Cryptography service decrypt failed")
        self.decrypted.append(ciphertext)
        return ciphertext.removeprefix("enc:")


class FakeTransport:
    """MailTransport that records messages, or raises ``error`` when set."""

    def __init__(self):
        self.error: Exception | None = None
        self.sent: list[tuple] = []

    async def send(self, message, config, password) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((message, config, password))


SMTP_SETTINGS = {
    SettingKey.SMTP_HOST: "smtp.example.com",
    SettingKey.SMTP_PORT: "587",
    SettingKey.SMTP_USER: "mailer",
    SettingKey.SMTP_PASSWORD: "enc:s3cret",
    SettingKey.SMTP_SENDER: "no-reply@example.com",
}

TEMPLATE_SETTINGS = {
    SettingKey.EMAIL_VERIFICATION_SUBJECT: "Verify your email",
    SettingKey.EMAIL_VERIFICATION_BODY: '<a href="{{ redirect_url }}">Verify</a>',
    SettingKey.EMAIL_VERIFICATION_REDIRECT_URL: "https://app/verify",
    SettingKey.PASSWORD_RESET_SUBJECT: "Reset your password",
    SettingKey.PASSWORD_RESET_BODY: '<a href="{{ redirect_url }}">Reset</a>',
    SettingKey.PASSWORD_RESET_REDIRECT_URL: "https://app/reset",
    SettingKey.MFA_VERIFICATION_SUBJECT: "Your sign-in code",
    SettingKey.MFA_VERIFICATION_BODY: '<a href="{{ redirect_url }}">Sign in</a>',
    SettingKey.MFA_VERIFICATION_REDIRECT_URL: "https://app/mfa",
}


async def insert_settings(db: AsyncSession, values: dict[SettingKey, str | None]) -> None:
    """Insert settings rows directly, bypassing the service."""
    for key, value in values.items():
        db.add(Setting(name=key.value, value=value))
    await db.commit()


@pytest.fixture
async def engine():
    """Create an in-memory database shared by every session of one test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_db(db: AsyncSession) -> AsyncSession:
    """Database with every well-known row present and NULL, as after migration."""
    await insert_settings(db, {key: None for key in SettingKey})
    return db


@pytest.fixture
async def configured_db(db: AsyncSession) -> AsyncSession:
    """Database with complete SMTP settings and all templates."""
    await insert_settings(db, {**SMTP_SETTINGS, **TEMPLATE_SETTINGS})
    return db


@pytest.fixture
def cipher() -> FakeCipher:
    return FakeCipher()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def email_service(cipher: FakeCipher, transport: FakeTransport) -> EmailService:
    return EmailService(cipher=cipher, transport=transport)


@pytest.fixture
async def client(session_factory, email_service: EmailService) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to the test database and fakes."""
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
