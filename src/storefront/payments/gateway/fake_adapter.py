"""Configurable fake card gateway for development and testing.

No network calls. Behaves like a processor's test mode: a handful of card
numbers always decline, expired cards are refused, and everything else
succeeds unless the gateway has been switched to fail via `configure`
(exposed over HTTP at /payments/gateway/configure outside production).
"""

from uuid import uuid4

from storefront.payments.gateway.port import (
    CardDetails,
    ChargeResult,
    PaymentGateway,
    TransactionStatus,
)
from storefront.shared.errors import PaymentGatewayError

DECLINED_CARD_NUMBERS = frozenset(
    {
        "4000000000000002",  # generic decline
        "4000000000009995",  # insufficient funds
    }
)


class FakeCardGateway(PaymentGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []
        self.transactions: dict[str, TransactionStatus] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def charge(
        self,
        card: CardDetails,
        amount: float,
        currency: str,
        description: str | None,
        reference: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "method": "charge",
                "last4": card.last4,
                "amount": amount,
                "currency": currency,
                "description": description,
                "reference": reference,
            }
        )

        if card.number in DECLINED_CARD_NUMBERS:
            return ChargeResult(success=False, status="declined", message="Card declined")
        if card.is_expired():
            return ChargeResult(success=False, status="declined", message="Card expired")
        if not self.should_succeed:
            return ChargeResult(success=False, status="failed", message=self.failure_reason)

        transaction_id = f"fake_txn_{uuid4().hex[:12]}"
        self.transactions[transaction_id] = TransactionStatus(
            transaction_id=transaction_id,
            status="succeeded",
            amount=amount,
            currency=currency,
            message=reference,
        )
        return ChargeResult(
            success=True,
            transaction_id=transaction_id,
            status="succeeded",
            message="Charge successful",
        )

    def query_transaction(self, transaction_id: str) -> TransactionStatus:
        self.calls.append({"method": "query_transaction", "transaction_id": transaction_id})
        try:
            return self.transactions[transaction_id]
        except KeyError:
            raise PaymentGatewayError(
                f"Unknown transaction {transaction_id}", transaction_id=transaction_id
            ) from None

    @property
    def charges(self) -> list[dict]:
        return [call for call in self.calls if call["method"] == "charge"]
