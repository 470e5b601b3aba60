"""
Connection settings for the Delta Exchange adapter.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from exchanges.delta.catalog import DEFAULT_CATALOG_TTL
from exchanges.delta.client import DEFAULT_TIMEOUT

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class DeltaConfig:
    """Configuration required to build a `DeltaTrader`."""

    api_key: str
    api_secret: str
    testnet: bool = False
    base_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    catalog_ttl: float = DEFAULT_CATALOG_TTL

    @staticmethod
    def from_env() -> "DeltaConfig":
        """
        Read ``DELTA_*`` environment variables, falling back to attributes of
        a local ``config`` module when one is importable.
        """
        try:
            import config as config_module  # type: ignore
        except ModuleNotFoundError:
            config_module = None  # type: ignore

        def setting(name: str, default: Any = None) -> Any:
            value = os.getenv(name)
            if value not in (None, ""):
                return value
            if config_module is not None:
                return getattr(config_module, name, default)
            return default

        api_key = setting("DELTA_API_KEY")
        api_secret = setting("DELTA_API_SECRET")
        if not api_key or not api_secret:
            raise ValueError("Delta credentials are required. Set DELTA_API_KEY and DELTA_API_SECRET.")

        return DeltaConfig(
            api_key=str(api_key),
            api_secret=str(api_secret),
            testnet=_as_bool(setting("DELTA_TESTNET", False)),
            base_url=setting("DELTA_BASE_URL") or None,
            timeout=float(setting("DELTA_TIMEOUT", DEFAULT_TIMEOUT)),
            catalog_ttl=float(setting("DELTA_CATALOG_TTL", DEFAULT_CATALOG_TTL)),
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY
