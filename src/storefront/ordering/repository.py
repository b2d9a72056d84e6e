"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.ordering.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def list_for_customer(self, customer_id, page: int, page_size: int):
        """Newest-first page of the customer's orders, as a Protean ResultSet."""
        return (
            self._dao.query.filter(customer_id=str(customer_id))
            .order_by("-created_at")
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )

    def find_for_customer(self, order_id, customer_id) -> Order | None:
        try:
            order = self.get(order_id)
        except ObjectNotFoundError:
            return None
        if str(order.customer_id) != str(customer_id):
            return None
        return order

    def find_by_reference(self, reference: str) -> Order | None:
        return self._dao.query.filter(reference=reference).all().first
