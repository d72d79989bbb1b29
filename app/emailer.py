import logging
import os
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from fastapi import Request

logger = logging.getLogger("emailer")

DEFAULT_SENDER = "EventHub <no-reply@example.com>"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class SMTPSettings:
    host: str
    port: int
    user: Optional[str]
    password: Optional[str]
    sender: str
    use_ssl: bool = False
    starttls: bool = True
    timeout: float = 10.0


class Mailer:
    """Sends HTML mail over SMTP; logs instead of sending when SMTP is not configured.

    ``send`` never raises. It returns True when the server accepted the message.
    """

    def __init__(self, settings: Optional[SMTPSettings] = None) -> None:
        self.settings = settings

    @classmethod
    def from_env(cls) -> "Mailer":
        host = os.getenv("SMTP_HOST")
        if not host:
            logger.warning(
                "Email service is not configured. Set SMTP_HOST, SMTP_PORT, SMTP_USER, "
                "SMTP_PASSWORD and SMTP_FROM to enable delivery."
            )
            return cls(None)

        user = os.getenv("SMTP_USER")
        settings = SMTPSettings(
            host=host,
            port=int(os.getenv("SMTP_PORT", "587")),
            user=user,
            password=os.getenv("SMTP_PASSWORD"),
            sender=os.getenv("SMTP_FROM", user or DEFAULT_SENDER),
            use_ssl=_env_flag("SMTP_SSL", "0"),
            starttls=_env_flag("SMTP_STARTTLS", "1"),
            timeout=float(os.getenv("SMTP_TIMEOUT_SECONDS", "10")),
        )
        logger.info("Email transport configured for %s:%s", settings.host, settings.port)
        return cls(settings)

    @property
    def configured(self) -> bool:
        return self.settings is not None

    def _build_message(self, to_email: str, subject: str, html: str, text: Optional[str]) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.sender if self.settings else DEFAULT_SENDER
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text or "Open in an HTML-capable client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def send(self, to_email: str, subject: str, html: str, text: Optional[str] = None) -> bool:
        if self.settings is None:
            logger.info("SMTP not configured; skipping actual send. Would send to %s", to_email)
            logger.debug("Subject: %s\nBody (html): %s", subject, html)
            return False

        s = self.settings
        msg = self._build_message(to_email, subject, html, text)
        context = ssl.create_default_context()
        try:
            if s.use_ssl:
                client = smtplib.SMTP_SSL(s.host, s.port, timeout=s.timeout, context=context)
            else:
                client = smtplib.SMTP(s.host, s.port, timeout=s.timeout)
            with client:
                if s.starttls and not s.use_ssl:
                    client.starttls(context=context)
                if s.user and s.password:
                    client.login(s.user, s.password)
                client.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Error sending email to %s: %s", to_email, exc)
            return False

        logger.info("Email sent to %s: %s", to_email, subject)
        return True


def get_mailer(request: Request) -> Mailer:
    """FastAPI dependency returning the mailer created at startup."""

    mailer = getattr(request.app.state, "mailer", None)
    if mailer is None:
        mailer = Mailer.from_env()
        request.app.state.mailer = mailer
    return mailer
