"""Invoice email dispatcher.

Renders the invoice PDF, builds an HTML email around it and hands the
message to the mail transport.  Every call is a single attempt: any
failure is raised as ``DispatchError`` and nothing is retried.  The PDF is
rendered before anything is composed, so a render failure never reaches
the transport.

Safety: recipient addresses are never logged, only the invoice number.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from pathlib import Path
from string import Template
from typing import Literal, Protocol

from invoice_mailer.core.settings import Settings, get_settings
from invoice_mailer.invoices.formatting import DEFAULT_CURRENCY_SYMBOL, format_currency
from invoice_mailer.invoices.models import InvoiceRecord
from invoice_mailer.notification.errors import DispatchError
from invoice_mailer.notification.pdf_renderer import DEFAULT_TEMPLATE_DIR, PdfRenderer
from invoice_mailer.notification.transport import MailConfig, MailTransport, SmtpTransport

logger = logging.getLogger(__name__)

_EMAIL_TEMPLATE = "invoice_email.html"


class InvoiceRenderer(Protocol):
    def render(self, invoice: InvoiceRecord) -> bytes: ...


# ---------------------------------------------------------------------------
# DeliveryReceipt
# ---------------------------------------------------------------------------

@dataclass
class DeliveryReceipt:
    """Record of a message accepted by the transport."""

    recipient: str
    subject: str
    attachment_filename: str | None = None
    status: Literal["SENT"] = "SENT"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Template rendering
# ---------------------------------------------------------------------------

def _load_template(template_dir: str | Path) -> str:
    """Return the HTML body template from *template_dir*.

    Falls back to the bundled template when *template_dir* has none.
    """
    path = Path(template_dir) / _EMAIL_TEMPLATE
    if path.is_file():
        return path.read_text(encoding="utf-8")

    default_path = DEFAULT_TEMPLATE_DIR / _EMAIL_TEMPLATE
    if default_path.is_file():
        return default_path.read_text(encoding="utf-8")

    raise FileNotFoundError(f"No {_EMAIL_TEMPLATE} in {template_dir} or {DEFAULT_TEMPLATE_DIR}")


def _render_body(template_html: str, invoice: InvoiceRecord, currency_symbol: str) -> str:
    """Substitute invoice values, HTML-escaped, into *template_html*."""
    return Template(template_html).safe_substitute(
        employee_name=escape(invoice.employee_name),
        invoice_number=escape(invoice.display_number),
        invoice_date=escape(invoice.display_date),
        grand_total=escape(format_currency(invoice.grand_total, currency_symbol)),
    )


# ---------------------------------------------------------------------------
# InvoiceMailer
# ---------------------------------------------------------------------------

class InvoiceMailer:
    """Send invoice and plain notifications through one mail transport."""

    def __init__(
        self,
        config: MailConfig,
        renderer: InvoiceRenderer | None = None,
        transport: MailTransport | None = None,
        template_dir: str | Path = DEFAULT_TEMPLATE_DIR,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        self.config = config
        self.currency_symbol = currency_symbol
        self.renderer = renderer or PdfRenderer(currency_symbol=currency_symbol)
        self.transport = transport or SmtpTransport(config)
        self.template_dir = Path(template_dir)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> InvoiceMailer:
        """Build a mailer wired to the SMTP relay named in *settings*."""
        settings = settings or get_settings()
        return cls(
            MailConfig.from_settings(settings),
            currency_symbol=settings.currency_symbol,
        )

    @property
    def sender(self) -> str:
        if self.config.from_name:
            return formataddr((self.config.from_name, self.config.from_address))
        return self.config.from_address

    # -- composition --------------------------------------------------------

    def compose_invoice_message(self, invoice: InvoiceRecord, pdf_bytes: bytes) -> MIMEMultipart:
        """Build the HTML message with the invoice PDF attached."""
        if not invoice.employee_email:
            raise ValueError(f"Invoice {invoice.display_number} has no recipient address")

        body = _render_body(_load_template(self.template_dir), invoice, self.currency_symbol)
        filename = invoice.attachment_filename

        msg = MIMEMultipart("mixed")
        msg["Subject"] = invoice.email_subject
        msg["From"] = self.sender
        msg["To"] = invoice.employee_email
        msg.attach(MIMEText(body, "html", "utf-8"))

        attachment = MIMEApplication(pdf_bytes, _subtype="pdf", Name=filename)
        attachment.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(attachment)
        return msg

    def compose_plain_message(self, to: str, subject: str, body: str) -> MIMEText:
        if not to:
            raise ValueError("Plain notification has no recipient address")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.config.from_address
        msg["To"] = to
        return msg

    # -- sending ------------------------------------------------------------

    def send_invoice_notification(self, invoice: InvoiceRecord) -> DeliveryReceipt:
        """Render, compose and send the invoice email for *invoice*."""
        number = invoice.display_number

        if invoice.totals_mismatch():
            logger.warning(
                "Invoice %s grand total does not equal subtotal plus tax; sending as given",
                number,
            )

        try:
            pdf_bytes = self.renderer.render(invoice)
        except Exception as exc:
            logger.error("Invoice %s not sent: rendering failed: %s", number, exc)
            raise DispatchError(f"Failed to render invoice {number}", cause=exc) from exc

        try:
            msg = self.compose_invoice_message(invoice, pdf_bytes)
            self.transport.send(msg)
        except Exception as exc:
            logger.error("Invoice %s not sent: %s", number, exc)
            raise DispatchError(f"Failed to send invoice email for {number}", cause=exc) from exc

        logger.info("Invoice %s email sent", number)
        return DeliveryReceipt(
            recipient=invoice.employee_email,
            subject=invoice.email_subject,
            attachment_filename=invoice.attachment_filename,
        )

    def send_plain_notification(self, to: str, subject: str, body: str) -> DeliveryReceipt:
        """Send a plain-text message with no attachment."""
        try:
            msg = self.compose_plain_message(to, subject, body)
            self.transport.send(msg)
        except Exception as exc:
            logger.error("Plain notification %r not sent: %s", subject, exc)
            raise DispatchError(f"Failed to send email {subject!r}", cause=exc) from exc

        logger.info("Plain notification %r sent", subject)
        return DeliveryReceipt(recipient=to, subject=subject)
