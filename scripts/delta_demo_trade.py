"""
Command-line helper for inspecting and trading a Delta Exchange account.

Usage examples:
    python scripts/delta_demo_trade.py balance
    python scripts/delta_demo_trade.py positions
    python scripts/delta_demo_trade.py open --symbol BTCUSD --side long --size 10 --leverage 5
    python scripts/delta_demo_trade.py stop-loss \
        --symbol BTCUSD --position-side LONG --size 10 --price 25000
    python scripts/delta_demo_trade.py cancel-all --symbol BTCUSD

Environment variables:
    DELTA_API_KEY
    DELTA_API_SECRET
    DELTA_TESTNET (optional, "1" to use the testnet endpoint)
    DELTA_BASE_URL, DELTA_TIMEOUT, DELTA_CATALOG_TTL (optional)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from typing import Any, Sequence

from exchanges.delta import DeltaConfig, DeltaTrader
from exchanges.errors import ExchangeError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delta Exchange Trade Helper")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("balance", help="Show the USDT wallet balance")
    subparsers.add_parser("positions", help="List open positions")

    price_parser = subparsers.add_parser("price", help="Show the latest ticker price")
    price_parser.add_argument("--symbol", required=True, help="Delta product symbol, e.g. BTCUSD")

    open_parser = subparsers.add_parser("open", help="Open a position with a market order")
    open_parser.add_argument("--symbol", required=True, help="Delta product symbol")
    open_parser.add_argument("--side", required=True, choices=["long", "short"], help="Position direction")
    open_parser.add_argument("--size", required=True, type=float, help="Order size")
    open_parser.add_argument("--leverage", type=float, default=1.0, help="Order leverage (defaults to 1x)")

    close_parser = subparsers.add_parser("close", help="Reduce a position with a reduce-only market order")
    close_parser.add_argument("--symbol", required=True, help="Delta product symbol")
    close_parser.add_argument("--side", required=True, choices=["long", "short"], help="Position to close")
    close_parser.add_argument("--size", required=True, type=float, help="Order size")

    leverage_parser = subparsers.add_parser("leverage", help="Change leverage for a product")
    leverage_parser.add_argument("--symbol", required=True, help="Delta product symbol")
    leverage_parser.add_argument("--leverage", required=True, type=float, help="New leverage")

    for command, help_text in (("stop-loss", "Place a stop-loss order"), ("take-profit", "Place a take-profit order")):
        risk_parser = subparsers.add_parser(command, help=help_text)
        risk_parser.add_argument("--symbol", required=True, help="Delta product symbol")
        risk_parser.add_argument(
            "--position-side", required=True, choices=["LONG", "SHORT"], help="Side of the protected position"
        )
        risk_parser.add_argument("--size", required=True, type=float, help="Order size")
        risk_parser.add_argument("--price", required=True, type=float, help="Trigger/limit price")

    cancel_parser = subparsers.add_parser("cancel-all", help="Cancel all open orders for a product")
    cancel_parser.add_argument("--symbol", required=True, help="Delta product symbol")
    return parser


def run(trader: DeltaTrader, args: argparse.Namespace) -> Any:
    if args.command == "balance":
        return trader.get_balance()
    if args.command == "positions":
        return trader.get_positions()
    if args.command == "price":
        return {"symbol": args.symbol, "price": trader.get_market_price(args.symbol)}
    if args.command == "open":
        if args.side == "long":
            return trader.open_long(args.symbol, args.size, args.leverage)
        return trader.open_short(args.symbol, args.size, args.leverage)
    if args.command == "close":
        if args.side == "long":
            return trader.close_long(args.symbol, args.size)
        return trader.close_short(args.symbol, args.size)
    if args.command == "leverage":
        trader.set_leverage(args.symbol, args.leverage)
        return {"symbol": args.symbol, "leverage": args.leverage}
    if args.command == "stop-loss":
        return trader.set_stop_loss(args.symbol, args.position_side, args.size, args.price)
    if args.command == "take-profit":
        return trader.set_take_profit(args.symbol, args.position_side, args.size, args.price)
    # cancel-all
    trader.cancel_all_orders(args.symbol)
    return {"symbol": args.symbol, "cancelled": True}


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = DeltaConfig.from_env()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    trader = DeltaTrader.from_config(config)
    try:
        response = run(trader, args)
    except (ExchangeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        trader.close()

    print(json.dumps(_to_jsonable(response), indent=2, default=str))


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


if __name__ == "__main__":
    main()
