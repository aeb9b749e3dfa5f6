"""Invoice PDF renderer.

Builds the invoice layout, converts it to HTML with the bundled stylesheet
and hands it to WeasyPrint.  The PDF is produced in memory only; nothing
is written to disk.

Safety: employee details are never logged, only the invoice number.
"""
from __future__ import annotations

import logging
from pathlib import Path

from invoice_mailer.invoices.formatting import DEFAULT_CURRENCY_SYMBOL
from invoice_mailer.invoices.models import InvoiceRecord
from invoice_mailer.notification.errors import RenderError
from invoice_mailer.notification.layout import build_layout, layout_to_html

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
_STYLESHEET = "invoice.css"


def _load_stylesheet(template_dir: Path) -> str:
    path = template_dir / _STYLESHEET
    if not path.is_file():
        raise FileNotFoundError(f"No {_STYLESHEET} in {template_dir}")
    return path.read_text(encoding="utf-8")


class PdfRenderer:
    """Render an ``InvoiceRecord`` to PDF bytes via WeasyPrint."""

    def __init__(
        self,
        template_dir: str | Path = DEFAULT_TEMPLATE_DIR,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        self.template_dir = Path(template_dir)
        self.currency_symbol = currency_symbol

    def render_html(self, invoice: InvoiceRecord) -> str:
        """Return the HTML document the PDF is rendered from."""
        blocks = build_layout(invoice, self.currency_symbol)
        stylesheet = _load_stylesheet(self.template_dir)
        return layout_to_html(blocks, stylesheet, title=f"Invoice {invoice.display_number}")

    def render(self, invoice: InvoiceRecord) -> bytes:
        """Return the PDF for *invoice*.

        Raises ``RenderError`` wrapping whatever went wrong; bytes are only
        returned when the whole document was produced.
        """
        try:
            html_content = self.render_html(invoice)

            import weasyprint  # lazy import, pulls in native libraries

            pdf_bytes = weasyprint.HTML(string=html_content).write_pdf()
        except Exception as exc:
            logger.error("Failed to render invoice %s: %s", invoice.display_number, exc)
            raise RenderError(
                f"Failed to render invoice {invoice.display_number}", cause=exc
            ) from exc

        if not pdf_bytes:
            logger.error("Failed to render invoice %s: empty output", invoice.display_number)
            raise RenderError(f"Renderer produced no output for invoice {invoice.display_number}")

        logger.info("Rendered invoice %s (%d bytes)", invoice.display_number, len(pdf_bytes))
        return pdf_bytes
