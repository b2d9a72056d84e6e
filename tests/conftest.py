import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from storefront.payments.gateway import reset_registry

    reset_registry()

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


@pytest.fixture
def fake_gateway():
    from storefront.payments.gateway import set_registry
    from storefront.payments.gateway.fake_adapter import FakeCardGateway
    from storefront.payments.gateway.port import PaymentMethod
    from storefront.payments.gateway.registry import PaymentGatewayRegistry

    gateway = FakeCardGateway()
    set_registry(PaymentGatewayRegistry({PaymentMethod.CREDIT_CARD: gateway}))
    return gateway


@pytest.fixture()
def client(fake_gateway):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from storefront.api import (
        customer_router,
        order_router,
        payment_router,
        product_router,
        register_exception_handlers,
    )

    app = FastAPI()
    app.include_router(customer_router)
    app.include_router(product_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def register(client):
    def _register(name="Ana Lopez", email="ana@example.com"):
        response = client.post("/customers", json={"name": name, "email": email})
        assert response.status_code == 201
        data = response.json()
        return data["customer_id"], {"Authorization": f"Bearer {data['access_token']}"}

    return _register


@pytest.fixture()
def add_product(client):
    def _add(name="Espresso Cup", price=19.99, stock=10):
        response = client.post("/products", json={"name": name, "price": price, "stock": stock})
        assert response.status_code == 201
        return response.json()["product_id"]

    return _add
