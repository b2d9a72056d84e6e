"""Payment gateway factory.

Provides get_registry() / set_registry() to swap the set of gateways the
checkout charges through:
- FakeCardGateway for development and testing
- HttpCardGateway when PAYMENT_GATEWAY=http
"""

from storefront.payments.gateway.card_adapter import HttpCardGateway
from storefront.payments.gateway.config import GatewayConfig
from storefront.payments.gateway.fake_adapter import FakeCardGateway
from storefront.payments.gateway.port import PaymentMethod
from storefront.payments.gateway.registry import PaymentGatewayRegistry

_current_registry: PaymentGatewayRegistry | None = None


def build_registry(config: GatewayConfig) -> PaymentGatewayRegistry:
    if config.driver == "http":
        card_gateway = HttpCardGateway(config)
    else:
        card_gateway = FakeCardGateway()
    return PaymentGatewayRegistry({PaymentMethod.CREDIT_CARD: card_gateway})


def get_registry() -> PaymentGatewayRegistry:
    """Return the process registry, built from the environment on first use."""
    global _current_registry
    if _current_registry is None:
        _current_registry = build_registry(GatewayConfig.from_env())
    return _current_registry


def set_registry(registry: PaymentGatewayRegistry) -> None:
    global _current_registry
    _current_registry = registry


def reset_registry() -> None:
    global _current_registry
    _current_registry = None
