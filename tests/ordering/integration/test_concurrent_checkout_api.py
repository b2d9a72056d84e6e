"""Integration tests: checkouts through the API do not wait on each other."""

import threading

import pytest

from storefront.domain import storefront
from storefront.payments.gateway import set_registry
from storefront.payments.gateway.fake_adapter import FakeCardGateway
from storefront.payments.gateway.port import PaymentMethod
from storefront.payments.gateway.registry import PaymentGatewayRegistry


class RendezvousGateway(FakeCardGateway):
    """Declines every charge, once `parties` charges are in flight at the same time.

    A charge that never meets the others breaks the barrier and surfaces as a
    processor fault.
    """

    def __init__(self, parties):
        super().__init__()
        self.barrier = threading.Barrier(parties)
        self.configure(should_succeed=False, failure_reason="Declined together")

    def charge(self, card, amount, currency, description, reference):
        self.barrier.wait(timeout=5)
        return super().charge(card, amount, currency, description, reference)


@pytest.fixture
def rendezvous_gateway(client):
    gateway = RendezvousGateway(parties=2)
    set_registry(PaymentGatewayRegistry({PaymentMethod.CREDIT_CARD: gateway}))
    return gateway


def _checkout_body(product_id):
    return {
        "items": [{"product_id": product_id, "quantity": 1}],
        "payment_method": "credit_card",
        "card_number": "4242424242424242",
        "cvv": "123",
        "expiration_month": 12,
        "expiration_year": 2099,
        "full_name": "Ana Lopez",
    }


class TestConcurrentCheckoutRequests:
    def test_slow_charges_for_different_products_overlap(self, client, register, add_product, rendezvous_gateway):
        requests = []
        for name, email in (("Ana Lopez", "ana@example.com"), ("Ben Ortiz", "ben@example.com")):
            _, headers = register(name=name, email=email)
            requests.append((add_product(name=f"Cup for {name}"), headers))

        responses = [None, None]

        def checkout(index):
            product_id, headers = requests[index]
            with storefront.domain_context():
                responses[index] = client.post("/orders", json=_checkout_body(product_id), headers=headers)

        threads = [threading.Thread(target=checkout, args=(index,)) for index in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert [response.status_code for response in responses] == [400, 400]
        assert all(response.json()["message"] == "Payment rejected: Declined together" for response in responses)
        assert len(rendezvous_gateway.charges) == 2
