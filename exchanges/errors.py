"""
Error taxonomy shared by exchange adapters.

Callers can tell a transient failure (``TransportError``) apart from a
malformed or rejected response (``ProtocolError``) and from a configuration
problem such as an unknown symbol (``ProductNotFoundError``).
"""

from __future__ import annotations

from typing import Optional


class ExchangeError(RuntimeError):
    """Base class for failures raised by an exchange adapter."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        payload: Optional[dict] = None,
    ) -> None:
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)
        self.operation = operation
        self.payload = payload or {}


class TransportError(ExchangeError):
    """Raised on connection errors, timeouts and non-2xx HTTP responses."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message, operation=operation)
        self.status_code = status_code
        self.body = body


class ProtocolError(ExchangeError):
    """Raised when a response cannot be parsed or the exchange reports failure."""


class ProductNotFoundError(ExchangeError):
    """Raised when a symbol is absent from the exchange product catalog."""

    def __init__(self, symbol: str, *, operation: str | None = None) -> None:
        super().__init__(f"product not found: {symbol}", operation=operation)
        self.symbol = symbol
