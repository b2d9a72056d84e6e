"""Card payment adapter talking to an external processor over HTTP.

The processor API is a small JSON contract:

    POST {base_url}/payments        -> {"success": bool, "transaction_id": str,
                                        "status": str, "message": str}
    GET  {base_url}/payments/{id}   -> {"transaction_id": str, "status": str,
                                        "amount": float, "currency": str}

A timeout, a transport error, a non-2xx response or an unreadable body is a
failed charge. A success without a transaction id is a failed charge too: the
order would have nothing to reconcile against.
"""

import httpx
import structlog

from storefront.payments.gateway.config import GatewayConfig
from storefront.payments.gateway.port import (
    CardDetails,
    ChargeResult,
    PaymentGateway,
    TransactionStatus,
)
from storefront.shared.errors import PaymentGatewayError

logger = structlog.get_logger(__name__)


class HttpCardGateway(PaymentGateway):
    def __init__(self, config: GatewayConfig, transport: httpx.BaseTransport | None = None) -> None:
        if not config.base_url:
            raise PaymentGatewayError("Card gateway requires a base URL")
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.Client:
        headers = {"Content-Type": "application/json", "User-Agent": "storefront/1.0"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return httpx.Client(
            base_url=self.config.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            transport=self._transport,
        )

    def charge(
        self,
        card: CardDetails,
        amount: float,
        currency: str,
        description: str | None,
        reference: str,
    ) -> ChargeResult:
        payload = {
            "card": {
                "number": card.number,
                "cvv": card.cvv,
                "expiration_month": card.expiry_month,
                "expiration_year": card.expiry_year,
                "holder_name": card.holder_name,
            },
            "amount": amount,
            "currency": currency,
            "description": description,
            "reference": reference,
        }

        try:
            with self._client() as client:
                response = client.post("/payments", json=payload)
        except httpx.TimeoutException:
            logger.warning("Card gateway timed out", reference=reference, last4=card.last4)
            return ChargeResult(success=False, status="timeout", message="Payment processor timed out")
        except httpx.HTTPError as exc:
            logger.warning("Card gateway unreachable", reference=reference, error=str(exc))
            return ChargeResult(success=False, status="error", message="Payment processor unavailable")

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.warning(
                "Card gateway returned an unreadable body",
                reference=reference,
                status_code=response.status_code,
            )
            return ChargeResult(success=False, status="error", message="Malformed response from payment processor")

        message = body.get("message")
        if not response.is_success:
            return ChargeResult(
                success=False,
                transaction_id=body.get("transaction_id"),
                status=body.get("status", "failed"),
                message=message or f"Payment processor returned HTTP {response.status_code}",
            )

        if body.get("success") is not True:
            return ChargeResult(
                success=False,
                transaction_id=body.get("transaction_id"),
                status=body.get("status", "declined"),
                message=message or "Payment declined",
            )

        transaction_id = body.get("transaction_id")
        if not transaction_id:
            logger.warning("Card gateway reported success without a transaction id", reference=reference)
            return ChargeResult(
                success=False,
                status="error",
                message="Payment processor did not return a transaction id",
            )

        return ChargeResult(
            success=True,
            transaction_id=str(transaction_id),
            status=body.get("status", "succeeded"),
            message=message or "Charge successful",
        )

    def query_transaction(self, transaction_id: str) -> TransactionStatus:
        try:
            with self._client() as client:
                response = client.get(f"/payments/{transaction_id}")
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise PaymentGatewayError(
                f"Could not query transaction {transaction_id}", transaction_id=transaction_id
            ) from exc

        if not isinstance(body, dict) or "status" not in body:
            raise PaymentGatewayError(
                f"Malformed transaction status for {transaction_id}", transaction_id=transaction_id
            )

        return TransactionStatus(
            transaction_id=str(body.get("transaction_id", transaction_id)),
            status=body["status"],
            amount=body.get("amount"),
            currency=body.get("currency"),
            message=body.get("message"),
        )
