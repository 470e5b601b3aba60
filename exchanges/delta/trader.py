"""
Delta Exchange binding of the `TradingClient` protocol.

Order-affecting methods share the same two-phase shape: resolve the product
id from the catalog, then issue exactly one mutating request. A failed
resolution aborts before anything is sent.
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from exchanges.base_client import ExchangeCredentials, TradingClient
from exchanges.delta.catalog import DEFAULT_CATALOG_TTL, ProductCatalog
from exchanges.delta.client import DEFAULT_TIMEOUT, DeltaRestClient, resolve_base_url
from exchanges.delta.config import DeltaConfig
from exchanges.delta.transform import (
    extract_balance,
    extract_ticker_price,
    normalize_order,
    normalize_positions,
    result_list,
    result_object,
)
from exchanges.schemas import (
    BalanceSnapshot,
    OrderIntent,
    OrderResult,
    OrderSide,
    PositionRecord,
)

logger = logging.getLogger(__name__)

WALLET_ENDPOINT = "/v2/wallet/balances"
POSITIONS_ENDPOINT = "/v2/positions"
ORDERS_ENDPOINT = "/v2/orders"
CANCEL_ALL_ENDPOINT = "/v2/orders/all"
CHANGE_MARGIN_ENDPOINT = "/v2/positions/change_margin"
TICKER_ENDPOINT = "/v2/tickers/{symbol}"

QUANTITY_DECIMALS = 8


def exit_side(position_side: str) -> OrderSide:
    """Side of an order that reduces a position: buy covers a short, sell closes a long."""
    normalized = (position_side or "").strip().upper()
    if normalized == "SHORT":
        return "buy"
    if normalized == "LONG":
        return "sell"
    raise ValueError(f"Unsupported position side '{position_side}'. Allowed: ['LONG', 'SHORT'].")


def new_client_order_id() -> str:
    return uuid.uuid4().hex


class DeltaTrader(TradingClient):
    """Trading client for the Delta Exchange derivatives REST API."""

    name = "delta"

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        testnet: bool = False,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        catalog_ttl: float = DEFAULT_CATALOG_TTL,
    ) -> None:
        self._credentials = ExchangeCredentials(
            api_key=api_key,
            api_secret=api_secret,
            base_url=resolve_base_url(testnet, base_url),
            testnet=testnet,
        )
        self._client = DeltaRestClient(self._credentials, timeout=timeout)
        self._catalog = ProductCatalog(self._client, ttl=catalog_ttl)

    @classmethod
    def from_config(cls, config: DeltaConfig) -> "DeltaTrader":
        return cls(
            config.api_key,
            config.api_secret,
            config.testnet,
            base_url=config.base_url,
            timeout=config.timeout,
            catalog_ttl=config.catalog_ttl,
        )

    @property
    def credentials(self) -> ExchangeCredentials:
        return self._credentials

    @property
    def catalog(self) -> ProductCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Account state
    # ------------------------------------------------------------------
    def get_balance(self) -> BalanceSnapshot:
        operation = "get_balance"
        payload = self._client.request("GET", WALLET_ENDPOINT, operation=operation)
        return extract_balance(result_list(payload, operation=operation), operation=operation)

    def get_positions(self) -> List[PositionRecord]:
        operation = "get_positions"
        payload = self._client.request("GET", POSITIONS_ENDPOINT, operation=operation)
        return normalize_positions(result_list(payload, operation=operation), operation=operation)

    def get_market_price(self, symbol: str) -> float:
        operation = "get_market_price"
        payload = self._client.request("GET", TICKER_ENDPOINT.format(symbol=symbol), operation=operation)
        return extract_ticker_price(result_object(payload, operation=operation), operation=operation)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------
    def open_long(self, symbol: str, quantity: float, leverage: float) -> OrderResult:
        return self._submit_market(symbol, quantity, "buy", operation="open_long", leverage=leverage)

    def open_short(self, symbol: str, quantity: float, leverage: float) -> OrderResult:
        return self._submit_market(symbol, quantity, "sell", operation="open_short", leverage=leverage)

    def close_long(self, symbol: str, quantity: float) -> OrderResult:
        return self._submit_market(symbol, quantity, "sell", operation="close_long", reduce_only=True)

    def close_short(self, symbol: str, quantity: float) -> OrderResult:
        return self._submit_market(symbol, quantity, "buy", operation="close_short", reduce_only=True)

    def set_stop_loss(
        self, symbol: str, position_side: str, quantity: float, stop_price: float
    ) -> OrderResult:
        side = exit_side(position_side)
        product_id = self._catalog.resolve(symbol, operation="set_stop_loss")
        intent = OrderIntent(
            product_id=product_id,
            size=quantity,
            side=side,
            order_type="stop_loss_order",
            reduce_only=True,
            stop_price=stop_price,
            client_order_id=new_client_order_id(),
        )
        return self._place(symbol, intent, operation="set_stop_loss")

    def set_take_profit(
        self, symbol: str, position_side: str, quantity: float, take_profit_price: float
    ) -> OrderResult:
        side = exit_side(position_side)
        product_id = self._catalog.resolve(symbol, operation="set_take_profit")
        intent = OrderIntent(
            product_id=product_id,
            size=quantity,
            side=side,
            order_type="take_profit_order",
            reduce_only=True,
            limit_price=take_profit_price,
            client_order_id=new_client_order_id(),
        )
        return self._place(symbol, intent, operation="set_take_profit")

    def set_leverage(self, symbol: str, leverage: float) -> None:
        operation = "set_leverage"
        product_id = self._catalog.resolve(symbol, operation=operation)
        logger.info("Setting %s leverage to %s", symbol, leverage)
        self._client.request(
            "POST",
            CHANGE_MARGIN_ENDPOINT,
            {"product_id": product_id, "leverage": leverage},
            operation=operation,
        )

    def cancel_all_orders(self, symbol: str) -> None:
        operation = "cancel_all_orders"
        product_id = self._catalog.resolve(symbol, operation=operation)
        logger.info("Cancelling all open orders for %s (product %s)", symbol, product_id)
        self._client.request("DELETE", CANCEL_ALL_ENDPOINT, {"product_id": product_id}, operation=operation)

    def format_quantity(self, symbol: str, quantity: float) -> str:
        # Per-symbol lot size is not consulted; every product gets 8 decimals.
        return f"{quantity:.{QUANTITY_DECIMALS}f}"

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _submit_market(
        self,
        symbol: str,
        quantity: float,
        side: OrderSide,
        *,
        operation: str,
        leverage: float | None = None,
        reduce_only: bool = False,
    ) -> OrderResult:
        product_id = self._catalog.resolve(symbol, operation=operation)
        intent = OrderIntent(
            product_id=product_id,
            size=quantity,
            side=side,
            order_type="market_order",
            leverage=leverage,
            reduce_only=reduce_only,
            client_order_id=new_client_order_id(),
        )
        return self._place(symbol, intent, operation=operation)

    def _place(self, symbol: str, intent: OrderIntent, *, operation: str) -> OrderResult:
        logger.info(
            "%s: submitting %s %s %s size=%s reduce_only=%s client_order_id=%s",
            operation,
            intent.order_type,
            intent.side,
            symbol,
            intent.size,
            intent.reduce_only,
            intent.client_order_id,
        )
        payload = self._client.request("POST", ORDERS_ENDPOINT, intent.to_payload(), operation=operation)
        result = normalize_order(symbol, intent, payload)
        logger.info("%s: order %s accepted (state=%s)", operation, result.order_id, result.state)
        return result
