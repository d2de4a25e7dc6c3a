"""Shared pytest fixtures."""

import re
from collections.abc import AsyncGenerator, Generator
from dataclasses import dataclass

import pytest
from fakes import FakeDatabase
from fastapi.testclient import TestClient

from ministry.app import App
from ministry.config import Config
from ministry.core.core import Core
from ministry.core.modules.user.models import User, UserRole
from ministry.web.server import create_fastapi_app

ADMIN_EMAIL = "admin@pkcm.test"
ADMIN_PASSWORD = "admin-secret"
TOKEN_RE = re.compile(r"token=([0-9a-f]{64})")


@dataclass
class SentEmail:
    to: str
    subject: str
    text: str
    html: str | None

    @property
    def reset_token(self) -> str:
        match = TOKEN_RE.search(self.text)
        assert match is not None, "no reset token in email"
        return match.group(1)


@pytest.fixture
def config() -> Config:
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/ministry_test",
        frontend_url="https://learn.pkcm.test",
        smtp_host="smtp.pkcm.test",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def sent_emails(monkeypatch: pytest.MonkeyPatch) -> list[SentEmail]:
    """Capture outgoing email instead of talking to SMTP."""
    outbox: list[SentEmail] = []

    async def fake_send_email(_config, to, subject, text, html=None):
        outbox.append(SentEmail(to=to, subject=subject, text=text, html=html))
        return True, None

    monkeypatch.setattr("ministry.core.modules.mail.service.send_email", fake_send_email)
    return outbox


@pytest.fixture
async def core(config: Config, database: FakeDatabase, sent_emails: list[SentEmail]) -> AsyncGenerator[Core]:
    """Started core on the in-memory database."""
    instance = Core(config, database)  # type: ignore[arg-type]
    await instance.on_start()
    yield instance
    await instance.on_stop()


@pytest.fixture
async def alice(core: Core) -> User:
    """Registered student alice/alice@x.com/secret1."""
    return await core.services.user.create_user(
        email="alice@x.com",
        username="alice",
        password="secret1",
        first_name="Alice",
        last_name="Moore",
        role=UserRole.STUDENT,
    )


@pytest.fixture
def client(config: Config, database: FakeDatabase, sent_emails: list[SentEmail]) -> Generator[TestClient]:
    """HTTP client over the full application, with lifespan running."""
    fastapi_app = create_fastapi_app(App(config, database), config)  # type: ignore[arg-type]
    with TestClient(fastapi_app) as test_client:
        yield test_client
