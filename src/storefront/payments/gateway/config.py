"""Payment processor settings, built once at start-up and passed to adapters."""

import os
from dataclasses import dataclass

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class GatewayConfig:
    driver: str = "fake"
    base_url: str = ""
    api_key: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        return cls(
            driver=os.getenv("PAYMENT_GATEWAY", "fake").lower(),
            base_url=os.getenv("PAYMENT_GATEWAY_URL", "").rstrip("/"),
            api_key=os.getenv("PAYMENT_GATEWAY_API_KEY") or None,
            timeout_seconds=float(os.getenv("PAYMENT_GATEWAY_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
        )
