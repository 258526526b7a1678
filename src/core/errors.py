"""Error taxonomy for the core domain.

Adapters translate library exceptions into these types so the core and the
presentation layer only ever deal with one family of errors.
"""

from __future__ import annotations


class QuoteError(Exception):
    """Base class for all quoteboard errors."""


class ValidationError(QuoteError):
    """Raised when a manually entered quote is missing text or category."""


class DecodeError(QuoteError):
    """Raised when an import payload or remote payload cannot be decoded."""


class RemoteItemError(DecodeError):
    """Raised when a single remote payload item cannot be translated."""


class TransportError(QuoteError):
    """Raised when the remote source cannot be reached or times out."""


class PersistenceError(QuoteError):
    """Raised when a durable slot write or read fails."""


class NoQuotesAvailable(QuoteError):
    """Raised when no record matches the active filter."""
