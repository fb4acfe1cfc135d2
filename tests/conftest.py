"""
Showcase API Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
import os
import tempfile

# Required settings must exist before showcase.main builds its module-level app
_TMP_DIR = tempfile.mkdtemp(prefix="showcase-tests-")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_EMAIL", "admin@studio42.dev")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/import.db")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from showcase.core.config import Settings, EMAIL_CONFIG_ID
from showcase.db.models import EmailConfig
from showcase.main import create_app


ADMIN_EMAIL = "admin@studio42.dev"
ADMIN_PASSWORD = "admin-password"


# =============================================================================
# Fake SMTP transport
# =============================================================================


class FakeSMTPSession:
    """One connection handed out by FakeSMTPFactory."""

    def __init__(self, factory: "FakeSMTPFactory"):
        self.factory = factory
        self.logins = []
        self.noops = 0
        self.closed = False

    def login(self, user, password):
        self.logins.append((user, password))
        if self.factory.login_error:
            raise self.factory.login_error

    def noop(self):
        self.noops += 1
        if self.factory.noop_error:
            raise self.factory.noop_error

    def send_message(self, message):
        if self.factory.send_error:
            raise self.factory.send_error
        self.factory.sent.append(message)

    def quit(self):
        self.closed = True

    def close(self):
        self.closed = True


class FakeSMTPFactory:
    """Stands in for open_smtp; records sessions and sent messages."""

    def __init__(self):
        self.connections = []
        self.sessions = []
        self.sent = []
        self.connect_error = None
        self.login_error = None
        self.noop_error = None
        self.send_error = None

    def __call__(self, host, port, *, secure, timeout):
        self.connections.append(
            {"host": host, "port": port, "secure": secure, "timeout": timeout}
        )
        if self.connect_error:
            raise self.connect_error
        session = FakeSMTPSession(self)
        self.sessions.append(session)
        return session


def make_email_config(**overrides) -> EmailConfig:
    values = dict(
        id=EMAIL_CONFIG_ID,
        enabled=True,
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="mailer@studio42.dev",
        smtp_password="smtp-password",
        smtp_secure=False,
        from_email="hello@studio42.dev",
        from_name="Studio42",
        admin_email="team@studio42.dev",
        confirmation_template=None,
        notification_template=None,
    )
    values.update(overrides)
    return EmailConfig(**values)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fresh SQLite file per test."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET_KEY="test-secret-key",
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        BASE_URL="https://studio42.dev",
        SMTP_TIMEOUT_SECONDS=5,
    )


@pytest.fixture
def smtp() -> FakeSMTPFactory:
    return FakeSMTPFactory()


@pytest.fixture
def app(settings, smtp):
    return create_app(settings, smtp_factory=smtp)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client with startup seeding applied."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client) -> Generator[Session, None, None]:
    session = app.state.session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def admin_token(client) -> str:
    response = client.post(
        "/api/admin/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def email_enabled(db_session) -> EmailConfig:
    """Turn on the stored email config with a complete SMTP setup."""
    config = db_session.get(EmailConfig, EMAIL_CONFIG_ID)
    reference = make_email_config()
    for column in (
        "enabled",
        "smtp_host",
        "smtp_port",
        "smtp_user",
        "smtp_password",
        "smtp_secure",
        "from_email",
        "from_name",
        "admin_email",
    ):
        setattr(config, column, getattr(reference, column))
    db_session.commit()
    return config


@pytest.fixture
def valid_payload() -> dict:
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "message": "This is a test message with enough characters.",
        "inquiryType": "GENERAL_INQUIRY",
        "contactMethod": "EMAIL",
    }
