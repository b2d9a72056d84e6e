"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A paid order was recorded together with its stock decrements."""

    __version__ = 1

    order_id: Identifier(required=True)
    reference: String(required=True)
    customer_id: Identifier(required=True)
    items: Text(required=True)  # JSON list of priced lines
    total_amount: Float(required=True)
    currency: String(required=True)
    transaction_id: String()
    payment_method: String()
    placed_at: DateTime(required=True)
