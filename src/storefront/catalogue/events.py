"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue with an opening price and stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    sku: String()
    price: Float(required=True)
    stock: Integer(required=True)
    added_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockDecremented:
    """Units of a product were sold and removed from stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    decremented_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    """Units of a product were added back to stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    new_stock: Integer(required=True)
    restocked_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The selling price of a product changed. Existing orders keep their prices."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)
    changed_at: DateTime(required=True)
