import re

import pytest

from exchanges.delta.trader import exit_side
from exchanges.errors import ProductNotFoundError, ProtocolError, TransportError

CLIENT_ORDER_ID = re.compile(r"^[0-9a-f]{32}$")


def _order_body(exchange):
    orders = exchange.calls_to("POST", "/v2/orders")
    assert len(orders) == 1
    return orders[0]["body"]


def test_open_long_places_market_buy_with_leverage(trader, exchange):
    exchange.respond(
        "POST",
        "/v2/orders",
        {"success": True, "result": {"id": 991, "state": "closed", "client_order_id": "abc"}},
    )

    result = trader.open_long("BTCUSD", 10, 25)

    body = _order_body(exchange)
    assert body["product_id"] == 27
    assert body["size"] == 10
    assert body["side"] == "buy"
    assert body["order_type"] == "market_order"
    assert body["leverage"] == 25
    assert "reduce_only" not in body
    assert CLIENT_ORDER_ID.match(body["client_order_id"])
    assert result.order_id == 991
    assert result.state == "closed"
    assert result.client_order_id == "abc"
    assert result.symbol == "BTCUSD"
    assert result.reduce_only is False


def test_open_short_places_market_sell(trader, exchange):
    result = trader.open_short("ETHUSD", 3, 5)

    body = _order_body(exchange)
    assert body["product_id"] == 3136
    assert body["side"] == "sell"
    assert body["leverage"] == 5
    assert result.side == "sell"
    assert result.client_order_id == body["client_order_id"]


def test_each_order_gets_a_fresh_client_order_id(trader, exchange):
    trader.open_long("BTCUSD", 1, 2)
    trader.open_long("BTCUSD", 1, 2)

    ids = {call["body"]["client_order_id"] for call in exchange.calls_to("POST", "/v2/orders")}
    assert len(ids) == 2


@pytest.mark.parametrize(
    ("method", "expected_side"),
    [("close_long", "sell"), ("close_short", "buy")],
)
def test_close_orders_are_reduce_only(trader, exchange, method, expected_side):
    result = getattr(trader, method)("BTCUSD", 4)

    body = _order_body(exchange)
    assert body["side"] == expected_side
    assert body["order_type"] == "market_order"
    assert body["reduce_only"] is True
    assert "leverage" not in body
    assert result.reduce_only is True


@pytest.mark.parametrize(
    ("position_side", "expected_side"),
    [("LONG", "sell"), ("SHORT", "buy"), ("short", "buy"), ("long", "sell")],
)
def test_stop_loss_moves_against_position(trader, exchange, position_side, expected_side):
    trader.set_stop_loss("BTCUSD", position_side, 4, 58000.0)

    body = _order_body(exchange)
    assert body["side"] == expected_side
    assert body["order_type"] == "stop_loss_order"
    assert body["stop_price"] == 58000.0
    assert body["reduce_only"] is True


@pytest.mark.parametrize(
    ("position_side", "expected_side"),
    [("LONG", "sell"), ("SHORT", "buy")],
)
def test_take_profit_moves_against_position(trader, exchange, position_side, expected_side):
    trader.set_take_profit("ETHUSD", position_side, 2, 2100.0)

    body = _order_body(exchange)
    assert body["side"] == expected_side
    assert body["order_type"] == "take_profit_order"
    assert body["limit_price"] == 2100.0
    assert "stop_price" not in body
    assert body["reduce_only"] is True


def test_unknown_position_side_is_rejected_before_any_request(trader, exchange):
    with pytest.raises(ValueError, match="position side"):
        trader.set_stop_loss("BTCUSD", "FLAT", 1, 100.0)

    assert exchange.calls == []


def test_exit_side():
    assert exit_side("SHORT") == "buy"
    assert exit_side("LONG") == "sell"


def test_set_leverage_posts_margin_change(trader, exchange):
    trader.set_leverage("SOLUSD", 20)

    calls = exchange.calls_to("POST", "/v2/positions/change_margin")
    assert len(calls) == 1
    assert calls[0]["body"] == {"product_id": 14969, "leverage": 20}
    assert exchange.calls_to("POST", "/v2/orders") == []


def test_cancel_all_orders_is_scoped_to_product(trader, exchange):
    trader.cancel_all_orders("ETHUSD")

    deletes = exchange.calls_to("DELETE")
    assert len(deletes) == 1
    assert deletes[0]["path"] == "/v2/orders/all"
    assert deletes[0]["body"] == {"product_id": 3136}


def test_cancel_all_orders_unknown_symbol_sends_no_delete(trader, exchange):
    with pytest.raises(ProductNotFoundError):
        trader.cancel_all_orders("ZZZUSD")

    assert exchange.calls_to("DELETE") == []


@pytest.mark.parametrize(
    "call",
    [
        lambda t: t.open_long("ZZZUSD", 1, 5),
        lambda t: t.open_short("ZZZUSD", 1, 5),
        lambda t: t.close_long("ZZZUSD", 1),
        lambda t: t.close_short("ZZZUSD", 1),
        lambda t: t.set_leverage("ZZZUSD", 5),
        lambda t: t.set_stop_loss("ZZZUSD", "LONG", 1, 10.0),
        lambda t: t.set_take_profit("ZZZUSD", "SHORT", 1, 10.0),
    ],
)
def test_unknown_symbol_never_issues_mutating_request(trader, exchange, call):
    with pytest.raises(ProductNotFoundError):
        call(trader)

    assert [c["method"] for c in exchange.calls] == ["GET"]


def test_order_transport_failure_propagates(trader, exchange):
    exchange.respond("POST", "/v2/orders", raw=b"gateway timeout", status=504)

    with pytest.raises(TransportError) as excinfo:
        trader.open_long("BTCUSD", 1, 5)

    assert excinfo.value.status_code == 504
    assert excinfo.value.operation == "open_long"


def test_rejected_order_is_protocol_error(trader, exchange):
    exchange.respond("POST", "/v2/orders", {"success": False, "error": {"code": "out_of_bankruptcy"}})

    with pytest.raises(ProtocolError, match="close_short"):
        trader.close_short("BTCUSD", 1)


def test_catalog_is_cached_between_orders(trader, exchange):
    trader.open_long("BTCUSD", 1, 5)
    trader.set_stop_loss("BTCUSD", "LONG", 1, 50000.0)

    assert len(exchange.calls_to("GET", "/v2/products")) == 1


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [
        (0.000001, "0.00000100"),
        (0.5, "0.50000000"),
        (1, "1.00000000"),
        (100000, "100000.00000000"),
        (123.456789123, "123.45678912"),
    ],
)
def test_format_quantity_uses_eight_decimals(trader, quantity, expected):
    formatted = trader.format_quantity("BTCUSD", quantity)

    assert formatted == expected
    assert len(formatted.split(".")[1]) == 8


@pytest.mark.parametrize("position_side", ["BOTH", "", "net"])
@pytest.mark.parametrize("method", ["set_stop_loss", "set_take_profit"])
def test_exit_orders_require_long_or_short(trader, exchange, method, position_side):
    with pytest.raises(ValueError, match="LONG"):
        getattr(trader, method)("BTCUSD", position_side, 1, 100.0)

    assert exchange.calls == []
