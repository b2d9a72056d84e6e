"""Tests for the payment gateway registry and its factory."""

import pytest

from storefront.payments.gateway import build_registry, get_registry, reset_registry, set_registry
from storefront.payments.gateway.card_adapter import HttpCardGateway
from storefront.payments.gateway.config import GatewayConfig
from storefront.payments.gateway.fake_adapter import FakeCardGateway
from storefront.payments.gateway.port import PaymentMethod
from storefront.payments.gateway.registry import PaymentGatewayRegistry
from storefront.shared.errors import UnsupportedPaymentMethodError


class TestRegistry:
    def test_lookup_by_tag(self):
        gateway = FakeCardGateway()
        registry = PaymentGatewayRegistry({PaymentMethod.CREDIT_CARD: gateway})
        assert registry.for_method("credit_card") is gateway
        assert registry.for_method(PaymentMethod.CREDIT_CARD) is gateway

    def test_unknown_tag(self):
        registry = PaymentGatewayRegistry({PaymentMethod.CREDIT_CARD: FakeCardGateway()})
        with pytest.raises(UnsupportedPaymentMethodError):
            registry.for_method("bitcoin")

    def test_known_but_unregistered_method(self):
        with pytest.raises(UnsupportedPaymentMethodError):
            PaymentGatewayRegistry().for_method("credit_card")


class TestFactory:
    def test_build_fake_registry(self):
        registry = build_registry(GatewayConfig(driver="fake"))
        assert isinstance(registry.for_method("credit_card"), FakeCardGateway)

    def test_build_http_registry(self):
        registry = build_registry(GatewayConfig(driver="http", base_url="https://processor.test"))
        assert isinstance(registry.for_method("credit_card"), HttpCardGateway)

    def test_get_registry_defaults_to_fake(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        reset_registry()
        assert isinstance(get_registry().for_method("credit_card"), FakeCardGateway)

    def test_set_registry(self):
        registry = PaymentGatewayRegistry()
        set_registry(registry)
        assert get_registry() is registry
