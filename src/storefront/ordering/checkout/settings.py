"""Checkout tuning, built once and handed to the engine."""

import os
from dataclasses import dataclass

from storefront.shared.money import DEFAULT_CURRENCY


@dataclass(frozen=True)
class CheckoutSettings:
    default_currency: str = DEFAULT_CURRENCY
    persistence_attempts: int = 3
    persistence_backoff_seconds: float = 0.05
    reference_attempts: int = 5

    @classmethod
    def from_env(cls) -> "CheckoutSettings":
        return cls(
            default_currency=os.getenv("CHECKOUT_DEFAULT_CURRENCY", DEFAULT_CURRENCY).upper(),
            persistence_attempts=int(os.getenv("CHECKOUT_PERSISTENCE_ATTEMPTS", "3")),
            persistence_backoff_seconds=float(os.getenv("CHECKOUT_PERSISTENCE_BACKOFF", "0.05")),
            reference_attempts=int(os.getenv("CHECKOUT_REFERENCE_ATTEMPTS", "5")),
        )
