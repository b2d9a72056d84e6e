"""Read side for orders, always scoped to the customer asking."""

import math
from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.ordering.order import Order
from storefront.shared.errors import CheckoutValidationError, OrderNotFoundError

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class OrderPage:
    items: list
    total: int
    page: int
    page_size: int
    total_pages: int


class OrderQueryService:
    def list_orders(self, customer_id, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> OrderPage:
        if page < 1:
            raise CheckoutValidationError("page must be at least 1", page=page)
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise CheckoutValidationError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}", page_size=page_size
            )

        results = current_domain.repository_for(Order).list_for_customer(customer_id, page, page_size)
        total = results.total
        return OrderPage(
            items=list(results.items),
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    def get_order(self, order_id, customer_id) -> Order:
        order = current_domain.repository_for(Order).find_for_customer(order_id, customer_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
