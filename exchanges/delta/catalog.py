"""
Symbol to product id resolution backed by the Delta product catalog.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from exchanges.delta.client import DeltaRestClient
from exchanges.errors import ProductNotFoundError, ProtocolError

logger = logging.getLogger(__name__)

PRODUCTS_ENDPOINT = "/v2/products"
DEFAULT_CATALOG_TTL = 300.0


@dataclass(frozen=True, slots=True)
class ProductReference:
    """A tradable instrument as listed in the catalog."""

    symbol: str
    product_id: int


def index_products(entries: Iterable[dict], *, operation: str) -> Dict[str, ProductReference]:
    """Map symbols to products, keeping the first entry listed for a symbol."""
    index: Dict[str, ProductReference] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        symbol = entry.get("symbol")
        if not isinstance(symbol, str) or not symbol or symbol in index:
            continue
        try:
            product_id = int(entry["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProtocolError(f"product {symbol} has no usable id", operation=operation) from exc
        index[symbol] = ProductReference(symbol=symbol, product_id=product_id)
    return index


class ProductCatalog:
    """
    Resolve trading symbols to Delta's numeric product ids.

    The catalog is kept for `ttl` seconds. A lookup that misses a cached
    catalog forces one refetch before failing, so newly listed products are
    picked up while unknown symbols still raise `ProductNotFoundError`.
    With ``ttl=0`` every lookup fetches the full catalog.
    """

    def __init__(
        self,
        client: DeltaRestClient,
        *,
        ttl: float = DEFAULT_CATALOG_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._ttl = max(0.0, float(ttl))
        self._clock = clock
        self._lock = threading.Lock()
        self._index: Optional[Dict[str, ProductReference]] = None
        self._fetched_at = 0.0

    def resolve(self, symbol: str, *, operation: str = "resolve_product") -> int:
        return self.lookup(symbol, operation=operation).product_id

    def lookup(self, symbol: str, *, operation: str = "resolve_product") -> ProductReference:
        cached = self._cached_index()
        if cached is not None:
            product = cached.get(symbol)
            if product is not None:
                return product
            logger.debug("%s not in cached catalog; refreshing", symbol)
        product = self._fetch(operation).get(symbol)
        if product is None:
            raise ProductNotFoundError(symbol, operation=operation)
        return product

    def invalidate(self) -> None:
        with self._lock:
            self._index = None
            self._fetched_at = 0.0

    def _cached_index(self) -> Optional[Dict[str, ProductReference]]:
        if self._ttl <= 0:
            return None
        with self._lock:
            if self._index is None or self._clock() - self._fetched_at >= self._ttl:
                return None
            return self._index

    def _fetch(self, operation: str) -> Dict[str, ProductReference]:
        # The round trip runs outside the lock; only the store is guarded.
        payload = self._client.request("GET", PRODUCTS_ENDPOINT, operation=operation)
        entries = payload.get("result")
        if not isinstance(entries, list):
            raise ProtocolError("product catalog result is not a list", operation=operation, payload=payload)
        index = index_products(entries, operation=operation)
        if self._ttl > 0:
            with self._lock:
                self._index = index
                self._fetched_at = self._clock()
        logger.debug("Loaded %d products from catalog", len(index))
        return index
