"""
Abstract client definitions for derivatives exchange integrations.

Concrete adapters (e.g. Delta Exchange) subclass `TradingClient` and
implement the required methods, returning the canonical records from
`exchanges.schemas` and raising the errors from `exchanges.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable

from exchanges.schemas import BalanceSnapshot, OrderResult, PositionRecord


@dataclass(frozen=True, slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    api_key: str
    api_secret: str
    base_url: str
    testnet: bool = False

    def __repr__(self) -> str:
        return (
            f"ExchangeCredentials(api_key={self.api_key!r}, api_secret='***', "
            f"base_url={self.base_url!r}, testnet={self.testnet!r})"
        )


@runtime_checkable
class TradingClient(Protocol):
    """Protocol describing the trading surface used by trading agents."""

    name: str

    def get_balance(self) -> BalanceSnapshot:
        """Return wallet balances in the settlement currency."""

    def get_positions(self) -> List[PositionRecord]:
        """Return open positions, excluding closed (zero-size) entries."""

    def get_market_price(self, symbol: str) -> float:
        """Return the latest traded price for `symbol`."""

    def open_long(self, symbol: str, quantity: float, leverage: float) -> OrderResult:
        """Open or extend a long position with a market order."""

    def open_short(self, symbol: str, quantity: float, leverage: float) -> OrderResult:
        """Open or extend a short position with a market order."""

    def close_long(self, symbol: str, quantity: float) -> OrderResult:
        """Reduce a long position with a reduce-only market order."""

    def close_short(self, symbol: str, quantity: float) -> OrderResult:
        """Reduce a short position with a reduce-only market order."""

    def set_leverage(self, symbol: str, leverage: float) -> None:
        """Change the leverage applied to `symbol`."""

    def set_stop_loss(
        self, symbol: str, position_side: str, quantity: float, stop_price: float
    ) -> OrderResult:
        """
        Place a reduce-only stop-loss order protecting the position.

        `position_side` must be "LONG" or "SHORT" (case-insensitive); the order
        sells against a long and buys against a short. Any other value raises
        `ValueError` before a request is sent.
        """

    def set_take_profit(
        self, symbol: str, position_side: str, quantity: float, take_profit_price: float
    ) -> OrderResult:
        """
        Place a reduce-only take-profit order for the position.

        `position_side` follows the same LONG/SHORT precondition as
        `set_stop_loss`.
        """

    def cancel_all_orders(self, symbol: str) -> None:
        """Cancel every open order for `symbol` (and only that symbol)."""

    def format_quantity(self, symbol: str, quantity: float) -> str:
        """Render a quantity at the precision the exchange expects."""

    def close(self) -> None:
        """Release network resources."""
