"""Tests for invoice_mailer/notification/pdf_renderer.py.

WeasyPrint is mocked; no real PDF rendering needed.
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from invoice_mailer.notification.errors import RenderError
from invoice_mailer.notification.pdf_renderer import (
    DEFAULT_TEMPLATE_DIR,
    PdfRenderer,
    _load_stylesheet,
)

PDF_BYTES = b"%PDF-1.7\n%mock\n"


def _weasyprint(pdf: bytes = PDF_BYTES) -> MagicMock:
    mock_wp = MagicMock()
    mock_wp.HTML.return_value.write_pdf.return_value = pdf
    return mock_wp


# ===========================================================================
# _load_stylesheet
# ===========================================================================

class TestLoadStylesheet:
    def test_bundled_stylesheet_exists(self):
        css = _load_stylesheet(DEFAULT_TEMPLATE_DIR)
        assert ".grand-total" in css

    def test_raises_when_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="invoice.css"):
            _load_stylesheet(tmp_path)


# ===========================================================================
# render
# ===========================================================================

class TestRender:
    def test_returns_pdf_bytes(self, invoice):
        mock_wp = _weasyprint()
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            result = PdfRenderer().render(invoice)

        assert result == PDF_BYTES
        html = mock_wp.HTML.call_args.kwargs["string"]
        assert "INVOICE" in html
        assert "Services/Work Details" in html
        mock_wp.HTML.return_value.write_pdf.assert_called_once_with()

    def test_renders_in_memory_only(self, invoice, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.dict("sys.modules", {"weasyprint": _weasyprint()}):
            PdfRenderer().render(invoice)

        assert list(tmp_path.iterdir()) == []

    def test_empty_services_render_header_only(self, invoice_factory):
        mock_wp = _weasyprint()
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            PdfRenderer().render(invoice_factory(services=[]))

        html = mock_wp.HTML.call_args.kwargs["string"]
        assert html.count("<tr>") == 1

    def test_currency_symbol_passed_through(self, invoice):
        mock_wp = _weasyprint()
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            PdfRenderer(currency_symbol="€").render(invoice)

        assert "Grand Total: €7080.00" in mock_wp.HTML.call_args.kwargs["string"]

    def test_engine_failure_raises_render_error(self, invoice):
        mock_wp = _weasyprint()
        mock_wp.HTML.return_value.write_pdf.side_effect = OSError("font not found")
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            with pytest.raises(RenderError) as exc_info:
                PdfRenderer().render(invoice)

        assert isinstance(exc_info.value.cause, OSError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_missing_stylesheet_raises_render_error(self, invoice, tmp_path):
        mock_wp = _weasyprint()
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            with pytest.raises(RenderError) as exc_info:
                PdfRenderer(template_dir=tmp_path).render(invoice)

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        mock_wp.HTML.assert_not_called()

    def test_missing_engine_raises_render_error(self, invoice):
        with patch.dict("sys.modules", {"weasyprint": None}):
            with pytest.raises(RenderError) as exc_info:
                PdfRenderer().render(invoice)

        assert isinstance(exc_info.value.cause, ImportError)

    def test_empty_output_raises_render_error(self, invoice):
        with patch.dict("sys.modules", {"weasyprint": _weasyprint(pdf=b"")}):
            with pytest.raises(RenderError, match="no output"):
                PdfRenderer().render(invoice)

    def test_employee_details_not_in_logs(self, invoice, caplog):
        with patch.dict("sys.modules", {"weasyprint": _weasyprint()}):
            with caplog.at_level("DEBUG"):
                PdfRenderer().render(invoice)

        assert "INV-001" in caplog.text
        assert "asha.rao@example.com" not in caplog.text
        assert "Asha Rao" not in caplog.text

    def test_empty_output_is_logged(self, invoice, caplog):
        with patch.dict("sys.modules", {"weasyprint": _weasyprint(pdf=b"")}):
            with caplog.at_level("ERROR"):
                with pytest.raises(RenderError):
                    PdfRenderer().render(invoice)

        assert "Failed to render invoice INV-001: empty output" in caplog.text

    def test_numeric_invoice_number(self, invoice_factory):
        mock_wp = _weasyprint()
        with patch.dict("sys.modules", {"weasyprint": mock_wp}):
            result = PdfRenderer().render(invoice_factory(number=1042))

        assert result == PDF_BYTES
        html = mock_wp.HTML.call_args.kwargs["string"]
        assert "<title>Invoice 1042</title>" in html
        assert "Invoice #:</span> 1042" in html
