"""Reconciliation items: captured payments with no order behind them.

When the post-payment unit of work cannot be committed the money has already
moved. The checkout records what it knows here, in a transaction of its own,
so an operator can refund the customer or recreate the order by hand.
"""

import json
from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import UnitOfWork, handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.payments.events import ReconciliationItemOpened, ReconciliationItemResolved

logger = structlog.get_logger(__name__)


class ReconciliationStatus(Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


@storefront.aggregate
class ReconciliationItem:
    reference: String(required=True, max_length=100)
    customer_id: Identifier(required=True)
    transaction_id: String(max_length=255)
    amount: Float(required=True, min_value=0.0)
    currency: String(required=True, max_length=3)
    payment_method: String(max_length=50)
    lines: Text()  # JSON list of {product_id, quantity, unit_price}
    reason: Text()
    status: String(choices=ReconciliationStatus, default=ReconciliationStatus.OPEN.value)
    resolution_note: Text()
    recorded_at: DateTime(default=lambda: datetime.now(UTC))
    resolved_at: DateTime()

    @classmethod
    def open(cls, reference, customer_id, transaction_id, amount, currency, payment_method, lines, reason):
        now = datetime.now(UTC)
        item = cls(
            reference=reference,
            customer_id=str(customer_id),
            transaction_id=transaction_id,
            amount=amount,
            currency=currency,
            payment_method=payment_method,
            lines=json.dumps(lines),
            reason=reason,
            status=ReconciliationStatus.OPEN.value,
            recorded_at=now,
        )
        item.raise_(
            ReconciliationItemOpened(
                item_id=item.id,
                reference=reference,
                customer_id=str(customer_id),
                transaction_id=transaction_id,
                amount=amount,
                currency=currency,
                reason=reason,
                recorded_at=now,
            )
        )
        return item

    @property
    def line_items(self) -> list[dict]:
        return json.loads(self.lines) if self.lines else []

    def resolve(self, note=None):
        if self.status == ReconciliationStatus.RESOLVED.value:
            raise ValidationError({"status": [f"Reconciliation item {self.reference} is already resolved"]})

        now = datetime.now(UTC)
        self.status = ReconciliationStatus.RESOLVED.value
        self.resolution_note = note
        self.resolved_at = now
        self.raise_(
            ReconciliationItemResolved(
                item_id=self.id,
                reference=self.reference,
                note=note,
                resolved_at=now,
            )
        )


@storefront.repository(part_of=ReconciliationItem)
class ReconciliationItemRepository:
    def find_open(self) -> list[ReconciliationItem]:
        return (
            self._dao.query.filter(status=ReconciliationStatus.OPEN.value)
            .order_by("-recorded_at")
            .all()
            .items
        )

    def find_by_reference(self, reference: str) -> ReconciliationItem | None:
        return self._dao.query.filter(reference=reference).all().first


def record_reconciliation_item(
    reference, customer_id, transaction_id, amount, currency, payment_method, lines, reason
) -> ReconciliationItem | None:
    """Log a captured payment that has no order, then persist it as a reconciliation item.

    The log line comes first and carries everything needed to settle the
    payment by hand, since the store may be the thing that failed. Returns
    None when the item could not be written.
    """
    logger.error(
        "checkout.reconciliation_required",
        reference=reference,
        customer_id=str(customer_id),
        transaction_id=transaction_id,
        amount=amount,
        currency=currency,
        payment_method=payment_method,
        lines=lines,
        reason=reason,
    )

    try:
        item = ReconciliationItem.open(
            reference=reference,
            customer_id=customer_id,
            transaction_id=transaction_id,
            amount=amount,
            currency=currency,
            payment_method=payment_method,
            lines=lines,
            reason=reason,
        )
        with UnitOfWork():
            current_domain.repository_for(ReconciliationItem).add(item)
    except Exception as exc:
        logger.exception(
            "checkout.reconciliation_write_failed",
            reference=reference,
            transaction_id=transaction_id,
            error=str(exc),
        )
        return None

    return item


@storefront.command(part_of="ReconciliationItem")
class ResolveReconciliationItem:
    item_id: Identifier(required=True)
    note: Text()


@storefront.command_handler(part_of=ReconciliationItem)
class ReconciliationHandler:
    @handle(ResolveReconciliationItem)
    def resolve(self, command):
        repo = current_domain.repository_for(ReconciliationItem)
        item = repo.get(command.item_id)
        item.resolve(command.note)
        repo.add(item)
