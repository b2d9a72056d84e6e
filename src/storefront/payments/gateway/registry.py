"""Payment method -> gateway lookup."""

from storefront.payments.gateway.port import PaymentGateway, PaymentMethod
from storefront.shared.errors import UnsupportedPaymentMethodError


class PaymentGatewayRegistry:
    def __init__(self, gateways: dict[PaymentMethod, PaymentGateway] | None = None) -> None:
        self._gateways: dict[PaymentMethod, PaymentGateway] = dict(gateways or {})

    def register(self, method: PaymentMethod, gateway: PaymentGateway) -> None:
        self._gateways[method] = gateway

    def for_method(self, tag) -> PaymentGateway:
        method = PaymentMethod.parse(tag)
        try:
            return self._gateways[method]
        except KeyError:
            raise UnsupportedPaymentMethodError(tag) from None

    @property
    def methods(self) -> list[PaymentMethod]:
        return list(self._gateways)
