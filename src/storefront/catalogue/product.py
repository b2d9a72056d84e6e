"""Product aggregate: the stock-bearing catalogue record the checkout reads and debits.

Price is a caller-visible fact that checkout copies onto order lines; it is
never changed by checkout. Stock is only ever lowered by `decrement_stock`,
which refuses before touching state when there is not enough left.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from storefront.catalogue.events import (
    ProductAdded,
    ProductPriceChanged,
    ProductRestocked,
    StockDecremented,
)
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStockError
from storefront.shared.money import round_money


@storefront.aggregate
class Product:
    """A purchasable catalogue item with a price and a count of units in stock."""

    name: String(required=True, max_length=255)
    sku: String(max_length=50)
    description: String(max_length=1000)
    price: Float(required=True, min_value=0.0)
    stock: Integer(required=True, min_value=0, default=0)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def add(cls, name, price, stock=0, sku=None, description=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            sku=sku,
            description=description,
            price=round_money(price),
            stock=stock,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                sku=sku,
                price=product.price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock >= quantity

    def decrement_stock(self, quantity: int) -> None:
        """Remove `quantity` units from stock, or raise without mutating anything."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStockError(self.id, self.name, available=self.stock, requested=quantity)

        previous = self.stock
        now = datetime.now(UTC)
        self.stock = previous - quantity
        self.updated_at = now

        self.raise_(
            StockDecremented(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                decremented_at=now,
            )
        )

    def restock(self, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        self.stock = self.stock + quantity
        self.updated_at = now

        self.raise_(
            ProductRestocked(
                product_id=self.id,
                quantity=quantity,
                new_stock=self.stock,
                restocked_at=now,
            )
        )

    def change_price(self, new_price: float) -> None:
        if new_price is None or new_price < 0:
            raise ValidationError({"price": ["Price must be a non-negative amount"]})

        previous = self.price
        now = datetime.now(UTC)
        self.price = round_money(new_price)
        self.updated_at = now

        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price=previous,
                new_price=self.price,
                changed_at=now,
            )
        )
