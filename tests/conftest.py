from decimal import Decimal

import pytest

from invoice_mailer.invoices.models import InvoiceRecord, ServiceItem
from invoice_mailer.notification.transport import MailConfig


def make_invoice(
    *,
    number: str | int = "INV-001",
    email: str = "asha.rao@example.com",
    services: list[ServiceItem] | None = None,
    grand_total: Decimal | None = None,
) -> InvoiceRecord:
    if services is None:
        services = [
            ServiceItem("Backend development", Decimal("10"), Decimal("500"), Decimal("5000")),
            ServiceItem("Code review", Decimal("2.5"), Decimal("400"), Decimal("1000")),
        ]
    sub_total = sum((s.total for s in services), Decimal(0))
    tax_amount = sub_total * Decimal("18") / Decimal(100)
    return InvoiceRecord(
        invoice_number=number,
        date="2024-05-31",
        employee_name="Asha Rao",
        employee_id="EMP-042",
        employee_email=email,
        employee_mobile="+91 98765 43210",
        employee_address="12 MG Road, Bengaluru",
        services=services,
        sub_total=sub_total,
        tax_rate=Decimal("18"),
        tax_amount=tax_amount,
        grand_total=sub_total + tax_amount if grand_total is None else grand_total,
    )


@pytest.fixture
def invoice() -> InvoiceRecord:
    return make_invoice()


@pytest.fixture
def mail_config() -> MailConfig:
    return MailConfig(
        from_address="billing@example.com",
        from_name="Invoice Team",
        smtp_host="localhost",
        smtp_port=25,
        use_tls=False,
    )


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    from invoice_mailer.core.settings import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def invoice_factory():
    return make_invoice
