"""Repository for the Product aggregate, as the checkout sees it."""

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    """Read-by-id comes from the base repository (`get`).

    `decrement_if_available` is the conditional decrement used during the
    post-payment mutation phase. It must be called inside the checkout's unit
    of work, so the save joins that transaction.
    """

    def find_by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku).all().first

    def decrement_if_available(self, product_id, quantity: int) -> Product:
        product = self.get(product_id)
        product.decrement_stock(quantity)
        self.add(product)
        return product
