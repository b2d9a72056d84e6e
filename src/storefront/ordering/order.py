"""Order aggregate: a paid purchase and the lines it was priced from.

An order is only ever written once, by the checkout, already COMPLETED and
carrying the processor's transaction id. Unit prices are copied from the
products at checkout time and never recomputed, so later price changes do not
reach existing orders.

PENDING, CANCELED and PAYMENT_FAILED are valid statuses for stored data but
the synchronous checkout never writes them: a failed attempt leaves no order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced
from storefront.shared.money import DEFAULT_CURRENCY, line_subtotal, quantize, sum_money


class OrderStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    PAYMENT_FAILED = "PAYMENT_FAILED"


@storefront.entity(part_of="Order")
class OrderItem:
    product_id: Identifier(required=True)
    product_name: String(max_length=255)  # display snapshot only
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)
    subtotal: Float(required=True, min_value=0.0)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def subtotal_matches_quantity_and_price(self):
        if self.quantity is None or self.unit_price is None or self.subtotal is None:
            return
        if quantize(self.subtotal) != quantize(line_subtotal(self.unit_price, self.quantity)):
            raise ValidationError(
                {"subtotal": [f"Subtotal {self.subtotal} does not equal {self.quantity} x {self.unit_price}"]}
            )


@storefront.aggregate
class Order:
    customer_id: Identifier(required=True)
    reference: String(required=True, max_length=100, unique=True)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total_amount: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)
    transaction_id: String(max_length=255)
    payment_method: String(max_length=50)
    description: String(max_length=500)
    items: HasMany(OrderItem)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def total_matches_items(self):
        if not self.items or self.total_amount is None:
            return
        expected = sum_money((item.subtotal for item in self.items), self.currency or DEFAULT_CURRENCY)
        if quantize(self.total_amount) != quantize(expected):
            raise ValidationError({"total_amount": [f"Total {self.total_amount} does not equal item sum {expected}"]})

    @classmethod
    def place(
        cls,
        customer_id,
        reference,
        lines,
        total_amount,
        currency,
        transaction_id,
        payment_method,
        description=None,
    ):
        """Build a COMPLETED order from priced lines.

        Args:
            lines: Iterable of objects with product_id, product_name,
                   quantity, unit_price and subtotal.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=str(customer_id),
            reference=reference,
            status=OrderStatus.COMPLETED.value,
            total_amount=total_amount,
            currency=currency,
            transaction_id=transaction_id,
            payment_method=payment_method,
            description=description,
            items=[
                OrderItem(
                    product_id=str(line.product_id),
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                    created_at=now,
                    updated_at=now,
                )
                for line in lines
            ],
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                reference=reference,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "quantity": line.quantity,
                            "unit_price": line.unit_price,
                            "subtotal": line.subtotal,
                        }
                        for line in lines
                    ]
                ),
                total_amount=total_amount,
                currency=currency,
                transaction_id=transaction_id,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order
