"""
Canonical records returned by exchange adapters.

Adapters normalize their exchange-specific payloads into these dataclasses so
trading agents and risk managers never handle raw response maps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional


OrderSide = Literal["buy", "sell"]
PositionSide = Literal["LONG", "SHORT"]
OrderKind = Literal["market_order", "stop_loss_order", "take_profit_order"]


@dataclass(frozen=True, slots=True)
class BalanceSnapshot:
    """Wallet balances expressed in the settlement currency."""

    total_wallet_balance: float = 0.0
    available_balance: float = 0.0
    total_margin_balance: float = 0.0

    @classmethod
    def zero(cls) -> "BalanceSnapshot":
        return cls()


@dataclass(frozen=True, slots=True)
class PositionRecord:
    """An open position; ``size`` keeps the sign reported by the exchange."""

    symbol: str
    size: float
    entry_price: float
    mark_price: float
    unrealized_pnl: float
    pnl_percent: float
    side: str
    leverage: float


@dataclass(slots=True)
class OrderIntent:
    """Order request built per call and rendered into the exchange payload."""

    product_id: int
    size: float
    side: OrderSide
    order_type: OrderKind = "market_order"
    leverage: Optional[float] = None
    reduce_only: bool = False
    stop_price: Optional[float] = None
    limit_price: Optional[float] = None
    client_order_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "product_id": self.product_id,
            "size": self.size,
            "side": self.side,
            "order_type": self.order_type,
        }
        if self.leverage is not None:
            payload["leverage"] = self.leverage
        if self.reduce_only:
            payload["reduce_only"] = True
        if self.stop_price is not None:
            payload["stop_price"] = self.stop_price
        if self.limit_price is not None:
            payload["limit_price"] = self.limit_price
        if self.client_order_id:
            payload["client_order_id"] = self.client_order_id
        return payload


@dataclass(slots=True)
class OrderResult:
    """Normalized acknowledgement of a submitted order."""

    symbol: str
    product_id: int
    side: OrderSide
    order_type: OrderKind
    size: float
    reduce_only: bool
    order_id: Optional[Any] = None
    client_order_id: Optional[str] = None
    state: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)
