"""Order transaction engine: the checkout.

Turns a cart and card details into a paid, persisted order, or leaves the
store as it found it:

1. Validate the cart, resolve the gateway for the payment method and load
   the customer.
2. Take the stock locks of every product in the cart, in id order. They are
   held until the checkout ends, so a second checkout for the same product
   waits here and then sees the stock this one left behind.
3. Load every product; check stock against the total
   quantity requested per product; freeze unit prices and subtotals, and
   round the total to the currency's minor unit.
4. Charge the card once. A decline or processor fault ends the checkout here,
   before any write.
5. In one unit of work: decrement each product and add the COMPLETED order
   with the prices from step 3.
6. Return the order as read back from the repository.

Once the charge succeeds it is never repeated: if the unit of work in step 5
cannot be committed the captured payment is recorded as a reconciliation item
and `ReconciliationRequiredError` is raised. Only store faults are retried;
an order the domain rejects fails the same way on every attempt.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.locks import stock_locks
from storefront.catalogue.product import Product
from storefront.identity.customer import Customer
from storefront.ordering.checkout.references import OrderReferences
from storefront.ordering.checkout.settings import CheckoutSettings
from storefront.ordering.order import Order
from storefront.payments.gateway.port import CardDetails, ChargeResult, PaymentGateway, PaymentMethod
from storefront.payments.gateway.registry import PaymentGatewayRegistry
from storefront.payments.reconciliation import record_reconciliation_item
from storefront.shared.errors import (
    CheckoutValidationError,
    CustomerNotFoundError,
    InsufficientStockError,
    PaymentGatewayError,
    PaymentRejectedError,
    ProductNotFoundError,
    ReconciliationRequiredError,
    StoreError,
)
from storefront.shared.money import is_supported_currency, line_subtotal, sum_money

logger = structlog.get_logger(__name__)

DEFAULT_DESCRIPTION = "Purchase"


@dataclass(frozen=True)
class LineItem:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class PaymentDetails:
    method: str | PaymentMethod
    card: CardDetails
    currency: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderTransactionEngine:
    def __init__(
        self,
        registry: PaymentGatewayRegistry,
        settings: CheckoutSettings | None = None,
        references: OrderReferences | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or CheckoutSettings()
        self.references = references or OrderReferences(attempts=self.settings.reference_attempts)

    def place_order(self, customer_id, line_items: Iterable[LineItem], payment: PaymentDetails) -> Order:
        line_items = list(line_items)
        self._validate_cart(line_items)

        gateway = self.registry.for_method(payment.method)
        method = PaymentMethod.parse(payment.method)
        currency = (payment.currency or self.settings.default_currency).upper()
        if not is_supported_currency(currency):
            raise CheckoutValidationError(f"Unsupported currency: {currency}", currency=currency)

        description = payment.description or DEFAULT_DESCRIPTION

        customer = self._load_customer(customer_id)
        product_ids = {str(line.product_id) for line in line_items}

        with stock_locks.hold(product_ids):
            lines = self._price_lines(line_items, currency)
            total = sum_money((line.subtotal for line in lines), currency)
            reference = self.references.next_reference(customer.id)

            with structlog.contextvars.bound_contextvars(checkout_reference=reference, customer_id=str(customer.id)):
                logger.info("checkout.priced", lines=len(lines), total=total, currency=currency)

                charge = self._charge(gateway, payment.card, total, currency, description, reference)
                logger.info("checkout.charged", transaction_id=charge.transaction_id, amount=total)

                order_id = self._persist(
                    customer_id=customer.id,
                    reference=reference,
                    lines=lines,
                    total=total,
                    currency=currency,
                    method=method,
                    description=description,
                    charge=charge,
                )
                logger.info("checkout.completed", order_id=str(order_id))

        return current_domain.repository_for(Order).get(order_id)

    def _validate_cart(self, line_items: list) -> None:
        if not line_items:
            raise CheckoutValidationError("Cart must contain at least one item")
        for index, line in enumerate(line_items):
            if not line.product_id:
                raise CheckoutValidationError(f"Item {index} has no product id")
            if not isinstance(line.quantity, int) or line.quantity < 1:
                raise CheckoutValidationError(
                    f"Item {index} quantity must be at least 1", product_id=str(line.product_id)
                )

    def _load_customer(self, customer_id) -> Customer:
        try:
            return current_domain.repository_for(Customer).get(customer_id)
        except ObjectNotFoundError:
            raise CustomerNotFoundError(customer_id) from None

    def _price_lines(self, line_items: list[LineItem], currency: str) -> list[PricedLine]:
        products = current_domain.repository_for(Product)
        requested: dict[str, int] = {}
        lines = []

        for line in line_items:
            product_id = str(line.product_id)
            try:
                product = products.get(product_id)
            except ObjectNotFoundError:
                raise ProductNotFoundError(product_id) from None

            # The same product may appear on several lines
            requested[product_id] = requested.get(product_id, 0) + line.quantity
            if not product.has_stock_for(requested[product_id]):
                raise InsufficientStockError(
                    product_id, product.name, available=product.stock, requested=requested[product_id]
                )

            lines.append(
                PricedLine(
                    product_id=product_id,
                    product_name=product.name,
                    quantity=line.quantity,
                    unit_price=product.price,
                    subtotal=line_subtotal(product.price, line.quantity, currency),
                )
            )
        return lines

    def _charge(
        self,
        gateway: PaymentGateway,
        card: CardDetails,
        total: float,
        currency: str,
        description: str,
        reference: str,
    ) -> ChargeResult:
        try:
            result = gateway.charge(
                card,
                amount=total,
                currency=currency,
                description=description,
                reference=reference,
            )
        except StoreError:
            raise
        except Exception as exc:
            logger.error("checkout.gateway_error", error=str(exc))
            raise PaymentGatewayError("Payment processor failed", reference=reference) from exc

        if not result.success:
            logger.info("checkout.payment_rejected", reason=result.message, status=result.status)
            raise PaymentRejectedError(result.message or "Payment declined", transaction_id=result.transaction_id)
        return result

    def _persist(self, customer_id, reference, lines, total, currency, method, description, charge):
        """Write the stock decrements and the order; the caller holds the stock locks."""
        quantities: dict[str, int] = {}
        for line in lines:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity

        attempts = max(1, self.settings.persistence_attempts)
        cause = None
        for attempt in range(1, attempts + 1):
            try:
                with UnitOfWork():
                    products = current_domain.repository_for(Product)
                    for product_id, quantity in quantities.items():
                        products.decrement_if_available(product_id, quantity)

                    order = Order.place(
                        customer_id=customer_id,
                        reference=reference,
                        lines=lines,
                        total_amount=total,
                        currency=currency,
                        transaction_id=charge.transaction_id,
                        payment_method=method.value,
                        description=description,
                    )
                    current_domain.repository_for(Order).add(order)
                return order.id
            except (InsufficientStockError, ValidationError) as exc:
                # Rejected by the domain, not by the store
                cause = exc
                logger.warning("checkout.persistence_rejected", attempt=attempt, error=str(exc))
                break
            except Exception as exc:
                cause = exc
                logger.warning("checkout.persistence_failed", attempt=attempt, of=attempts, error=str(exc))
                if attempt < attempts:
                    time.sleep(self.settings.persistence_backoff_seconds * attempt)

        record_reconciliation_item(
            reference=reference,
            customer_id=customer_id,
            transaction_id=charge.transaction_id,
            amount=total,
            currency=currency,
            payment_method=method.value,
            lines=[
                {"product_id": line.product_id, "quantity": line.quantity, "unit_price": line.unit_price}
                for line in lines
            ],
            reason=str(cause),
        )
        raise ReconciliationRequiredError(reference, charge.transaction_id) from cause
