"""Invoice document layout.

An invoice is described as an ordered list of blocks (headings, key/value
tables, the itemised table, the summary and a footer).  ``build_layout``
decides *what* goes on the page; ``layout_to_html`` turns the blocks into
markup for the PDF engine.  Keeping the two apart lets the formatting be
checked without rendering a PDF.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from invoice_mailer.invoices.formatting import (
    DEFAULT_CURRENCY_SYMBOL,
    format_currency,
    format_quantity,
    format_rate,
)
from invoice_mailer.invoices.models import InvoiceRecord

ITEM_COLUMNS = ("Description", "Hours", "Rate", "Amount")
FOOTER_TEXT = "Thank you for your business!"


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class Heading:
    text: str
    level: int = 2
    centered: bool = False

    def to_html(self) -> str:
        css = ' class="centered"' if self.centered else ""
        return f"<h{self.level}{css}>{escape(self.text)}</h{self.level}>"


@dataclass
class KeyValueBlock:
    """Label/value pairs printed one per line."""

    rows: list[tuple[str, object]] = field(default_factory=list)

    def lines(self) -> list[str]:
        return [f"{label}: {value}" for label, value in self.rows]

    def to_html(self) -> str:
        items = "".join(
            f'<div class="kv-row"><span class="kv-label">{escape(label)}:</span> '
            f"{escape(str(value))}</div>"
            for label, value in self.rows
        )
        return f'<div class="kv-block">{items}</div>'


@dataclass
class ItemTable:
    """Itemised services table; rows keep the order of the invoice."""

    columns: tuple[str, ...] = ITEM_COLUMNS
    rows: list[tuple[str, ...]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Rows in the rendered table, header included."""
        return len(self.rows) + 1

    def to_html(self) -> str:
        head = "".join(f"<th>{escape(c)}</th>" for c in self.columns)
        body = "".join(
            "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
            for row in self.rows
        )
        return (
            '<table class="items">'
            f"<thead><tr>{head}</tr></thead>"
            f"<tbody>{body}</tbody>"
            "</table>"
        )


@dataclass
class SummaryLine:
    label: str
    value: str
    emphasized: bool = False

    @property
    def text(self) -> str:
        return f"{self.label}: {self.value}"


@dataclass
class SummaryBlock:
    lines: list[SummaryLine] = field(default_factory=list)

    def to_html(self) -> str:
        parts = []
        for line in self.lines:
            css = "summary-line grand-total" if line.emphasized else "summary-line"
            parts.append(f'<p class="{css}">{escape(line.text)}</p>')
        return f'<div class="summary">{"".join(parts)}</div>'


@dataclass
class Footer:
    text: str = FOOTER_TEXT

    def to_html(self) -> str:
        return f'<p class="footer">{escape(self.text)}</p>'


Block = Heading | KeyValueBlock | ItemTable | SummaryBlock | Footer


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def build_layout(
    invoice: InvoiceRecord,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> list[Block]:
    """Return the blocks of *invoice* in page order."""

    def money(value: object) -> str:
        return format_currency(value, currency_symbol)

    items = ItemTable(
        rows=[
            (s.description, format_quantity(s.hours), money(s.rate), money(s.total))
            for s in invoice.services
        ]
    )

    return [
        Heading("INVOICE", level=1, centered=True),
        KeyValueBlock(
            [
                ("Invoice #", invoice.display_number),
                ("Date", invoice.display_date),
            ]
        ),
        Heading("Employee Information"),
        KeyValueBlock(
            [
                ("Name", invoice.employee_name),
                ("ID", invoice.employee_id),
                ("Email", invoice.employee_email),
                ("Phone", invoice.employee_mobile),
                ("Address", invoice.employee_address),
            ]
        ),
        Heading("Services/Work Details"),
        items,
        Heading("Summary"),
        SummaryBlock(
            [
                SummaryLine("Subtotal", money(invoice.sub_total)),
                SummaryLine(f"Tax ({format_rate(invoice.tax_rate)}%)", money(invoice.tax_amount)),
                SummaryLine("Grand Total", money(invoice.grand_total), emphasized=True),
            ]
        ),
        Footer(),
    ]


def layout_to_html(blocks: list[Block], stylesheet: str = "", title: str = "Invoice") -> str:
    """Render *blocks* to a standalone HTML document."""
    body = "\n".join(block.to_html() for block in blocks)
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title>"
        f"<style>{stylesheet}</style>"
        f"</head><body>\n{body}\n</body></html>"
    )
