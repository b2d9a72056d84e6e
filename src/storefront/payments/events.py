"""Domain events for reconciliation items."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="ReconciliationItem")
class ReconciliationItemOpened:
    """A charge was captured but the order it paid for could not be recorded."""

    __version__ = 1

    item_id: Identifier(required=True)
    reference: String(required=True)
    customer_id: Identifier(required=True)
    transaction_id: String()
    amount: Float(required=True)
    currency: String(required=True)
    reason: Text()
    recorded_at: DateTime(required=True)


@storefront.event(part_of="ReconciliationItem")
class ReconciliationItemResolved:
    __version__ = 1

    item_id: Identifier(required=True)
    reference: String(required=True)
    note: Text()
    resolved_at: DateTime(required=True)
