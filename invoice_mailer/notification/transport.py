"""SMTP transport and its configuration.

One connection per message; the call blocks until the relay accepts or
rejects it.  Errors from ``smtplib`` (and socket-level ``OSError``) are
left to propagate to the caller.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import Message
from email.utils import getaddresses
from typing import Protocol

from invoice_mailer.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# MailConfig
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MailConfig:
    """Sender identity and relay connection details."""

    from_address: str
    from_name: str = ""
    smtp_host: str = "localhost"
    smtp_port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    use_ssl: bool = False
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MailConfig:
        settings = settings or get_settings()
        return cls(
            from_address=settings.mail_from,
            from_name=settings.mail_from_name,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
        )


class MailTransport(Protocol):
    def send(self, message: Message) -> None: ...


# ---------------------------------------------------------------------------
# SmtpTransport
# ---------------------------------------------------------------------------

class SmtpTransport:
    """Deliver composed messages through an SMTP relay."""

    def __init__(self, config: MailConfig) -> None:
        self.config = config

    def _connect(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.use_ssl:
            return smtplib.SMTP_SSL(cfg.smtp_host, cfg.smtp_port, timeout=cfg.timeout)
        return smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=cfg.timeout)

    def send(self, message: Message) -> None:
        cfg = self.config
        recipients = [addr for _, addr in getaddresses(message.get_all("To", [])) if addr]
        with self._connect() as server:
            if cfg.use_tls and not cfg.use_ssl:
                server.starttls()
            if cfg.username:
                server.login(cfg.username, cfg.password or "")
            server.sendmail(cfg.from_address, recipients, message.as_string())
        logger.debug("Relay %s:%d accepted message", cfg.smtp_host, cfg.smtp_port)
