"""
Signed REST transport for Delta Exchange.

Each call is a single round trip: the payload is serialized, signed, sent
with a bounded timeout and either returned as a decoded envelope or raised
as a typed error. There is no retry or backoff at this layer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal, Optional

import httpx

from exchanges.base_client import ExchangeCredentials
from exchanges.delta.signer import build_signed_request
from exchanges.errors import ProtocolError, TransportError

logger = logging.getLogger(__name__)

MAINNET_BASE_URL = "https://api.delta.exchange"
TESTNET_BASE_URL = "https://testnet-api.delta.exchange"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "delta-trader/python"

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


def resolve_base_url(testnet: bool, base_url: str | None = None) -> str:
    if base_url:
        return base_url.rstrip("/")
    return TESTNET_BASE_URL if testnet else MAINNET_BASE_URL


class DeltaRestClient:
    """Thin authenticated client over a pooled `httpx.Client`."""

    def __init__(self, credentials: ExchangeCredentials, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._credentials = credentials
        self._client = httpx.Client(base_url=credentials.base_url, timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._credentials.base_url

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: Optional[dict] = None,
        *,
        operation: str,
    ) -> dict:
        """
        Send a signed request and return the decoded response envelope.

        `params` is serialized to the JSON body only when given; otherwise the
        body is empty, which is also what gets signed.
        """
        body_text = json.dumps(params, separators=(",", ":")) if params is not None else ""
        signed = build_signed_request(self._credentials.api_secret, method, path, body_text)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            **signed.auth_headers(self._credentials.api_key),
        }

        logger.debug("%s %s %s", operation, method, path)
        try:
            response = self._client.request(
                method,
                path,
                content=body_text if body_text else None,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            logger.warning("%s timed out calling %s %s", operation, method, path)
            raise TransportError(f"request timed out: {exc}", operation=operation) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s failed calling %s %s: %s", operation, method, path, exc)
            raise TransportError(f"request failed: {exc}", operation=operation) from exc

        if not response.is_success:
            logger.warning("%s got HTTP %s from %s %s", operation, response.status_code, method, path)
            raise TransportError(
                f"API error (status {response.status_code}): {response.text}",
                operation=operation,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ProtocolError(f"response is not valid JSON: {exc}", operation=operation) from exc
        if not isinstance(payload, dict):
            raise ProtocolError("response is not a JSON object", operation=operation)
        if payload.get("success") is not True:
            raise ProtocolError(
                f"API returned error: {payload.get('error')}",
                operation=operation,
                payload=payload,
            )
        return payload

    def close(self) -> None:
        self._client.close()
