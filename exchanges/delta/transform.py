"""
Helper functions for transforming Delta API responses into canonical records.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from exchanges.errors import ProtocolError
from exchanges.schemas import BalanceSnapshot, OrderIntent, OrderResult, PositionRecord

SETTLEMENT_CURRENCY = "USDT"


def result_list(payload: dict, *, operation: str) -> list:
    result = payload.get("result")
    if not isinstance(result, list):
        raise ProtocolError("result is not a list", operation=operation, payload=payload)
    return result


def result_object(payload: dict, *, operation: str) -> dict:
    result = payload.get("result")
    if not isinstance(result, dict):
        raise ProtocolError("result is not an object", operation=operation, payload=payload)
    return result


def extract_balance(
    entries: Iterable[dict],
    *,
    currency: str = SETTLEMENT_CURRENCY,
    operation: str = "get_balance",
) -> BalanceSnapshot:
    """
    Pick the settlement currency out of the wallet list. A wallet without
    that currency yields the zero snapshot rather than an error.
    """
    for entry in entries:
        if not isinstance(entry, dict) or entry.get("asset") != currency:
            continue
        balance = _number(entry.get("balance"), "balance", operation)
        return BalanceSnapshot(
            total_wallet_balance=balance,
            available_balance=_number(entry.get("available_balance"), "available_balance", operation),
            total_margin_balance=balance,
        )
    return BalanceSnapshot.zero()


def normalize_positions(
    entries: Iterable[dict],
    *,
    operation: str = "get_positions",
) -> List[PositionRecord]:
    """
    Map raw positions 1:1 in response order. Zero-size entries are closed
    positions and are dropped.
    """
    positions: List[PositionRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ProtocolError("position entry is not an object", operation=operation)
        if entry.get("size") in (None, ""):
            raise ProtocolError(f"position {entry.get('symbol')!r} has no size", operation=operation)
        size = _number(entry.get("size"), "size", operation)
        if size == 0:
            continue
        positions.append(
            PositionRecord(
                symbol=str(entry.get("symbol") or ""),
                size=size,
                entry_price=_number(entry.get("entry_price"), "entry_price", operation),
                mark_price=_number(entry.get("mark_price"), "mark_price", operation),
                unrealized_pnl=_number(entry.get("unrealized_pnl"), "unrealized_pnl", operation),
                pnl_percent=_number(entry.get("unrealized_pnl_percent"), "unrealized_pnl_percent", operation),
                side=str(entry.get("side") or "").upper(),
                leverage=_number(entry.get("leverage"), "leverage", operation),
            )
        )
    return positions


def extract_ticker_price(ticker: dict, *, operation: str = "get_market_price") -> float:
    return _number(ticker.get("close"), "close", operation)


def normalize_order(symbol: str, intent: OrderIntent, payload: dict) -> OrderResult:
    result = payload.get("result")
    details = result if isinstance(result, dict) else {}
    return OrderResult(
        symbol=symbol,
        product_id=intent.product_id,
        side=intent.side,
        order_type=intent.order_type,
        size=intent.size,
        reduce_only=intent.reduce_only,
        order_id=details.get("id"),
        client_order_id=details.get("client_order_id") or intent.client_order_id,
        state=details.get("state"),
        raw=payload,
    )


def _number(value: Any, field: str, operation: str) -> float:
    if value in (None, ""):
        return 0.0
    if isinstance(value, bool):
        raise ProtocolError(f"field {field} is not numeric: {value!r}", operation=operation)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(f"field {field} is not numeric: {value!r}", operation=operation) from exc
