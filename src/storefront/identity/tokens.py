"""Signed bearer tokens identifying the calling customer.

Format: ``<payload>.<signature>`` where payload is url-safe base64 JSON
``{"sub": customer_id, "exp": unix_seconds}`` and signature is HMAC-SHA256
over the encoded payload. The core never looks inside a token; it only
receives the customer id the boundary extracted from it.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from dataclasses import dataclass


class InvalidTokenError(Exception):
    """The token is malformed, tampered with or expired."""


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    ttl_seconds: int = 3600

    @classmethod
    def from_env(cls) -> "TokenSettings":
        return cls(
            secret=os.getenv("STOREFRONT_TOKEN_SECRET", "storefront-dev-secret"),
            ttl_seconds=int(os.getenv("STOREFRONT_TOKEN_TTL", "3600")),
        )


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


class AccessTokens:
    def __init__(self, settings: TokenSettings) -> None:
        self.settings = settings

    def _sign(self, message: bytes) -> str:
        digest = hmac.new(self.settings.secret.encode(), message, hashlib.sha256).digest()
        return _b64encode(digest)

    def issue(self, customer_id, now: float | None = None) -> str:
        issued_at = int(now if now is not None else time.time())
        payload = {"sub": str(customer_id), "exp": issued_at + self.settings.ttl_seconds}
        encoded = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
        return f"{encoded}.{self._sign(encoded.encode())}"

    def verify(self, token: str, now: float | None = None) -> str:
        """Return the customer id carried by `token`."""
        try:
            encoded, signature = token.split(".")
        except (AttributeError, ValueError):
            raise InvalidTokenError("Malformed token") from None

        if not hmac.compare_digest(signature, self._sign(encoded.encode())):
            raise InvalidTokenError("Invalid token signature")

        try:
            payload = json.loads(_b64decode(encoded))
        except (ValueError, TypeError):
            raise InvalidTokenError("Malformed token payload") from None

        if not isinstance(payload, dict) or not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")

        current = now if now is not None else time.time()
        if int(payload.get("exp", 0)) < current:
            raise InvalidTokenError("Token expired")

        return payload["sub"]
