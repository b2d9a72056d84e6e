"""Application tests for recording and resolving reconciliation items."""

from protean.utils.globals import current_domain

from storefront.payments.reconciliation import (
    ReconciliationItem,
    ReconciliationStatus,
    ResolveReconciliationItem,
    record_reconciliation_item,
)


def _record(reference="ORD-ABCDEF12-1700000000000"):
    return record_reconciliation_item(
        reference=reference,
        customer_id="cust-1",
        transaction_id="txn-1",
        amount=39.98,
        currency="USD",
        payment_method="credit_card",
        lines=[{"product_id": "p1", "quantity": 2, "unit_price": 19.99}],
        reason="database unavailable",
    )


class TestRecordReconciliationItem:
    def test_item_is_persisted(self):
        item = _record()

        stored = current_domain.repository_for(ReconciliationItem).get(item.id)
        assert stored.reference == "ORD-ABCDEF12-1700000000000"
        assert stored.transaction_id == "txn-1"
        assert stored.status == ReconciliationStatus.OPEN.value

    def test_find_open_and_by_reference(self):
        _record("ORD-A-1")
        _record("ORD-B-2")

        repo = current_domain.repository_for(ReconciliationItem)
        assert {item.reference for item in repo.find_open()} == {"ORD-A-1", "ORD-B-2"}
        assert repo.find_by_reference("ORD-B-2").reference == "ORD-B-2"


class TestResolveReconciliationItem:
    def test_resolve(self):
        item = _record()
        current_domain.process(ResolveReconciliationItem(item_id=item.id, note="Refunded"), asynchronous=False)

        repo = current_domain.repository_for(ReconciliationItem)
        assert repo.get(item.id).status == ReconciliationStatus.RESOLVED.value
        assert repo.find_open() == []
