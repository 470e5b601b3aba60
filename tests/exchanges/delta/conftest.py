import json

import httpx
import pytest

from exchanges.delta.client import TESTNET_BASE_URL
from exchanges.delta.trader import DeltaTrader

PRODUCTS = [
    {"id": 27, "symbol": "BTCUSD", "contract_type": "perpetual_futures"},
    {"id": 3136, "symbol": "ETHUSD", "contract_type": "perpetual_futures"},
    {"id": 14969, "symbol": "SOLUSD", "contract_type": "perpetual_futures"},
]


class FakeDeltaExchange:
    """Routes mocked `httpx.Client.request` calls to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response | Exception | dict] = {
            ("GET", "/v2/products"): {"success": True, "result": PRODUCTS},
        }
        self.calls: list[dict] = []

    def respond(self, method: str, path: str, payload: dict | None = None, *, status: int = 200, raw: bytes | None = None):
        request = httpx.Request(method, TESTNET_BASE_URL + path)
        if raw is not None:
            self.routes[(method, path)] = httpx.Response(status, content=raw, request=request)
        else:
            self.routes[(method, path)] = httpx.Response(status, json=payload, request=request)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def __call__(self, method, path, content=None, headers=None, **_):
        body = json.loads(content) if content else None
        self.calls.append({"method": method, "path": path, "content": content, "body": body, "headers": headers})
        route = self.routes.get((method, path))
        if route is None:
            route = {"success": True, "result": {"id": len(self.calls), "state": "open"}}
        if isinstance(route, Exception):
            raise route
        if isinstance(route, dict):
            return httpx.Response(200, json=route, request=httpx.Request(method, TESTNET_BASE_URL + path))
        return route

    def calls_to(self, method: str, path: str | None = None) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and (path is None or c["path"] == path)]


@pytest.fixture
def mock_httpx_client(mocker):
    return mocker.patch("httpx.Client")


@pytest.fixture
def exchange(mock_httpx_client):
    fake = FakeDeltaExchange()
    mock_httpx_client.return_value.request.side_effect = fake
    return fake


@pytest.fixture
def trader(exchange):
    client = DeltaTrader("key", "secret", testnet=True)
    yield client
    client.close()
