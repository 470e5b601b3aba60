"""
Delta Exchange adapters.

Submodules cover signing, the REST transport, the product catalog and the
`DeltaTrader` that binds them to the `TradingClient` protocol.
"""

from .config import DeltaConfig  # noqa: F401
from .trader import DeltaTrader  # noqa: F401
