import smtplib
from datetime import datetime

import pytest

from app.email_templates import booking_confirmation_html, event_created_html
from app.emailer import Mailer, SMTPSettings
from app.services.notifications import deliver

from conftest import RecordingMailer


def _settings(**overrides) -> SMTPSettings:
    values = dict(host="smtp.example.com", port=587, user="mailer", password="pw", sender="EventHub <hi@example.com>")
    values.update(overrides)
    return SMTPSettings(**values)


def test_unconfigured_mailer_skips_send(monkeypatch):
    monkeypatch.delenv("SMTP_HOST", raising=False)
    mailer = Mailer.from_env()

    assert mailer.configured is False
    assert mailer.send("bob@example.com", "Hello", "<p>hi</p>") is False


def test_from_env_reads_smtp_settings(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "465")
    monkeypatch.setenv("SMTP_USER", "mailer")
    monkeypatch.setenv("SMTP_SSL", "true")
    monkeypatch.delenv("SMTP_FROM", raising=False)

    mailer = Mailer.from_env()

    assert mailer.configured
    assert mailer.settings.port == 465
    assert mailer.settings.use_ssl is True
    assert mailer.settings.sender == "mailer"


def test_connection_failure_returns_false(monkeypatch):
    def refuse(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    assert Mailer(_settings()).send("bob@example.com", "Hello", "<p>hi</p>") is False


def test_send_uses_starttls_and_login(monkeypatch):
    calls = []

    class FakeSMTP:
        def __init__(self, host, port, timeout):
            calls.append(("connect", host, port, timeout))

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self, context=None):
            calls.append(("starttls",))

        def login(self, user, password):
            calls.append(("login", user))

        def send_message(self, msg):
            calls.append(("send", msg["To"], msg["Subject"]))

    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)

    assert Mailer(_settings(timeout=3.0)).send("bob@example.com", "Hello", "<p>hi</p>") is True
    assert calls == [
        ("connect", "smtp.example.com", 587, 3.0),
        ("starttls",),
        ("login", "mailer"),
        ("send", "bob@example.com", "Hello"),
    ]


def test_deliver_swallows_transport_errors():
    assert deliver(RecordingMailer(fail=True), "bob@example.com", "Hello", "<p>hi</p>") is False


def test_deliver_passes_message_through():
    mailer = RecordingMailer()
    assert deliver(mailer, "bob@example.com", "Hello", "<p>hi</p>") is True
    assert mailer.sent == [{"to": "bob@example.com", "subject": "Hello", "html": "<p>hi</p>"}]


@pytest.mark.parametrize("render", ["created", "booked"])
def test_templates_escape_user_content(render):
    date = datetime(2030, 6, 1)
    if render == "created":
        html = event_created_html("<b>Alice</b>", "<script>x</script>", date, "18:00", "Hall & Co")
    else:
        html = booking_confirmation_html("<b>Bob</b>", "<script>x</script>", date, "18:00", "Hall & Co", 3)
        assert "<strong>3</strong> event(s)" in html

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Hall &amp; Co" in html
    assert "06/01/2030" in html


def test_templates_fall_back_to_generic_greeting():
    html = event_created_html(None, "Party", datetime(2030, 6, 1), "18:00", "Hall")
    assert "Dear User," in html
