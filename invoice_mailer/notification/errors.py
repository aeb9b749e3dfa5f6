"""Error kinds raised by the renderer and the mailer.

Both wrap the underlying exception: it is chained as ``__cause__`` and
also exposed as ``cause`` for callers that report it.
"""
from __future__ import annotations


class InvoiceMailerError(Exception):
    """Base class for all invoice delivery failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RenderError(InvoiceMailerError):
    """The invoice document could not be built."""


class DispatchError(InvoiceMailerError):
    """The message could not be composed or the transport rejected it."""
