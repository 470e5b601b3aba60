"""
Exchange integration layer: canonical records, the shared trading protocol,
and exchange-specific adapters.
"""

from .base_client import ExchangeCredentials, TradingClient  # noqa: F401
from .errors import ExchangeError, ProductNotFoundError, ProtocolError, TransportError  # noqa: F401
from .schemas import BalanceSnapshot, OrderIntent, OrderResult, PositionRecord  # noqa: F401
