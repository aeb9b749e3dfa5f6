"""Invoice records consumed by the renderer and the mailer.

Records are assembled by the caller and treated as read-only here.  The
caller owns the arithmetic invariants (``total == hours * rate`` per item,
``grand_total == sub_total + tax_amount``); nothing in this package
recomputes or enforces them on an existing record.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from invoice_mailer.invoices.formatting import to_decimal

_HUNDRED = Decimal(100)


def _pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first of *keys* present in *payload* (camelCase or snake_case)."""
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def compute_totals(
    services: list[ServiceItem],
    tax_rate: object,
) -> tuple[Decimal, Decimal, Decimal]:
    """Return ``(sub_total, tax_amount, grand_total)`` for *services*."""
    sub_total = sum((s.total for s in services), Decimal(0))
    tax_amount = sub_total * to_decimal(tax_rate) / _HUNDRED
    return sub_total, tax_amount, sub_total + tax_amount


# ---------------------------------------------------------------------------
# ServiceItem
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServiceItem:
    """One billable line on an invoice."""

    description: str
    hours: Decimal
    rate: Decimal
    total: Decimal

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ServiceItem:
        hours = to_decimal(_pick(payload, "hours", default=0))
        rate = to_decimal(_pick(payload, "rate", default=0))
        total = _pick(payload, "total", "amount")
        return cls(
            description=str(_pick(payload, "description", default="")),
            hours=hours,
            rate=rate,
            total=hours * rate if total is None else to_decimal(total),
        )


# ---------------------------------------------------------------------------
# InvoiceRecord
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvoiceRecord:
    """A fully assembled invoice: party details, line items and totals."""

    invoice_number: str | int
    date: str | datetime.date
    employee_name: str
    employee_id: str
    employee_email: str
    employee_mobile: str
    employee_address: str
    services: list[ServiceItem] = field(default_factory=list)
    sub_total: Decimal = Decimal(0)
    tax_rate: Decimal = Decimal(0)
    tax_amount: Decimal = Decimal(0)
    grand_total: Decimal = Decimal(0)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> InvoiceRecord:
        """Build a record from an API payload.

        Accepts the camelCase keys used by the invoice API (``invoiceNumber``,
        ``employeeMobile``, ``subTotal`` ...) as well as snake_case.  Totals
        that are absent are derived from the services and tax rate; totals
        that are present are kept as given.
        """
        services = [ServiceItem.from_dict(s) for s in _pick(payload, "services", default=[])]
        tax_rate = to_decimal(_pick(payload, "taxRate", "tax_rate", default=0))
        sub_total, tax_amount, grand_total = compute_totals(services, tax_rate)

        raw_sub = _pick(payload, "subTotal", "sub_total")
        raw_tax = _pick(payload, "taxAmount", "tax_amount")
        raw_grand = _pick(payload, "grandTotal", "grand_total")
        if raw_sub is not None:
            sub_total = to_decimal(raw_sub)
        if raw_tax is not None:
            tax_amount = to_decimal(raw_tax)
        if raw_grand is not None:
            grand_total = to_decimal(raw_grand)
        elif raw_sub is not None or raw_tax is not None:
            grand_total = sub_total + tax_amount

        return cls(
            invoice_number=str(_pick(payload, "invoiceNumber", "invoice_number", default="")),
            date=_pick(payload, "date", default=""),
            employee_name=str(_pick(payload, "employeeName", "employee_name", default="")),
            employee_id=str(_pick(payload, "employeeId", "employee_id", default="")),
            employee_email=str(_pick(payload, "employeeEmail", "employee_email", default="")),
            employee_mobile=str(
                _pick(payload, "employeeMobile", "employee_mobile", "employeePhone", default="")
            ),
            employee_address=str(_pick(payload, "employeeAddress", "employee_address", default="")),
            services=services,
            sub_total=sub_total,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            grand_total=grand_total,
        )

    # -- derived names ------------------------------------------------------

    @property
    def display_number(self) -> str:
        return str(self.invoice_number)

    @property
    def attachment_filename(self) -> str:
        return f"Invoice_{self.display_number}.pdf"

    @property
    def email_subject(self) -> str:
        return f"Your Invoice #{self.display_number}"

    @property
    def display_date(self) -> str:
        if isinstance(self.date, datetime.date):
            return self.date.isoformat()
        return str(self.date)

    def totals_mismatch(self) -> bool:
        """Return True if ``grand_total`` differs from ``sub_total + tax_amount``.

        Compared at cent precision.  Informational only.
        """
        expected = to_decimal(self.sub_total) + to_decimal(self.tax_amount)
        return abs(expected - to_decimal(self.grand_total)) >= Decimal("0.005")
