"""Application tests for the order query service."""

import pytest

from storefront.ordering.checkout.engine import LineItem, OrderTransactionEngine, PaymentDetails
from storefront.ordering.checkout.settings import CheckoutSettings
from storefront.ordering.queries import OrderQueryService
from storefront.payments.gateway import get_registry
from storefront.shared.errors import CheckoutValidationError, OrderNotFoundError


@pytest.fixture
def place(fake_gateway, make_product, card):
    engine = OrderTransactionEngine(get_registry(), CheckoutSettings(persistence_backoff_seconds=0))
    product = make_product(stock=100)

    def _place(customer, quantity=1):
        return engine.place_order(
            customer.id,
            [LineItem(product_id=product.id, quantity=quantity)],
            PaymentDetails(method="credit_card", card=card),
        )

    return _place


@pytest.fixture
def queries():
    return OrderQueryService()


class TestListOrders:
    def test_no_orders(self, queries, customer):
        page = queries.list_orders(customer.id)
        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 0
        assert page.page == 1
        assert page.page_size == 10

    def test_lists_only_own_orders(self, queries, place, customer, other_customer):
        mine = place(customer)
        place(other_customer)

        page = queries.list_orders(customer.id)
        assert page.total == 1
        assert [order.id for order in page.items] == [mine.id]

    def test_pagination(self, queries, place, customer):
        for quantity in range(1, 6):
            place(customer, quantity=quantity)

        first = queries.list_orders(customer.id, page=1, page_size=2)
        last = queries.list_orders(customer.id, page=3, page_size=2)

        assert first.total == 5
        assert first.total_pages == 3
        assert len(first.items) == 2
        assert len(last.items) == 1

    def test_newest_first(self, queries, place, customer):
        older = place(customer)
        newer = place(customer)

        page = queries.list_orders(customer.id)
        ids = [order.id for order in page.items]
        assert ids.index(newer.id) < ids.index(older.id)

    @pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (1, 51)])
    def test_invalid_paging(self, queries, customer, page, page_size):
        with pytest.raises(CheckoutValidationError):
            queries.list_orders(customer.id, page=page, page_size=page_size)


class TestGetOrder:
    def test_get_own_order(self, queries, place, customer):
        order = place(customer, quantity=2)
        found = queries.get_order(order.id, customer.id)
        assert found.id == order.id
        assert found.items[0].quantity == 2

    def test_foreign_order_looks_missing(self, queries, place, customer, other_customer):
        order = place(other_customer)

        with pytest.raises(OrderNotFoundError) as foreign:
            queries.get_order(order.id, customer.id)
        with pytest.raises(OrderNotFoundError) as missing:
            queries.get_order("no-such-order", customer.id)

        assert str(foreign.value).replace(str(order.id), "X") == str(missing.value).replace("no-such-order", "X")
