"""Render invoices as PDF documents and deliver them by email."""
