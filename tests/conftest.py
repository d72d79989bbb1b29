"""Shared test fixtures."""

from typing import Callable

import pytest
from fastapi.testclient import TestClient

import app.database as database
from app.emailer import get_mailer
from app.main import app


class RecordingMailer:
    """Stands in for the SMTP mailer and keeps every message it is handed."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []

    def send(self, to_email: str, subject: str, html: str, text=None) -> bool:
        if self.fail:
            raise RuntimeError("SMTP connection refused")
        self.sent.append({"to": to_email, "subject": subject, "html": html})
        return True


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Launch Party",
        "date": "2030-06-01",
        "time": "18:00",
        "location": "Main Hall",
        "description": "Celebrating the launch.",
        "category": "Social",
        "capacity": 10,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(name="mailer")
def mailer_fixture() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture(name="client")
def client_fixture(tmp_path, mailer):
    """A test client bound to a fresh SQLite database and a recording mailer."""

    original_url = database.CURRENT_DATABASE_URL
    database.configure_engine(f"sqlite+aiosqlite:///{(tmp_path / 'api.db').as_posix()}")
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    database.configure_engine(original_url)


@pytest.fixture(name="signup")
def signup_fixture(client) -> Callable[..., tuple[str, dict]]:
    """Register a user; returns (user id, auth headers)."""

    def _signup(name: str, email: str, password: str = "secret123") -> tuple[str, dict]:
        response = client.post(
            "/api/auth/signup", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}

    return _signup
