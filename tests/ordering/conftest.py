import pytest
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.identity.customer import Customer
from storefront.payments.gateway.port import CardDetails


@pytest.fixture
def customer():
    customer = Customer.register(name="Ana Lopez", email="ana@example.com")
    current_domain.repository_for(Customer).add(customer)
    return customer


@pytest.fixture
def other_customer():
    customer = Customer.register(name="Ben Ortiz", email="ben@example.com")
    current_domain.repository_for(Customer).add(customer)
    return customer


@pytest.fixture
def make_product():
    def _make(name="Espresso Cup", price=19.99, stock=10):
        product = Product.add(name=name, price=price, stock=stock)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture
def card():
    return CardDetails(
        number="4242424242424242",
        cvv="123",
        expiry_month=12,
        expiry_year=2099,
        holder_name="Ana Lopez",
    )
