"""
Request signing for the Delta Exchange REST API.

Delta authenticates private calls with an HMAC-SHA256 over
``method + path + body + timestamp`` (no delimiters), hex-encoded in
lowercase. The order of the concatenation is part of the wire contract.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A request ready to be sent, together with its signature."""

    method: str
    path: str
    body: str
    timestamp: int
    signature: str

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {
            "api-key": api_key,
            "signature": self.signature,
            "timestamp": str(self.timestamp),
        }


def sign(secret: str, method: str, path: str, body: str, timestamp: int) -> str:
    message = f"{method}{path}{body}{timestamp}"
    mac = hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    )
    return mac.hexdigest()


def build_signed_request(
    secret: str,
    method: str,
    path: str,
    body: str = "",
    timestamp: Optional[int] = None,
) -> SignedRequest:
    """Sign a request, stamping it with the current unix time when none is given."""
    if timestamp is None:
        timestamp = int(time.time())
    return SignedRequest(
        method=method,
        path=path,
        body=body,
        timestamp=timestamp,
        signature=sign(secret, method, path, body, timestamp),
    )
