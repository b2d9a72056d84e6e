"""Checkout error taxonomy.

Every error raised by the order transaction engine and the order queries is a
`StoreError`. The HTTP boundary maps `status_code` straight onto the response;
the engine never translates or hides them.
"""


class StoreError(Exception):
    """Base class for all storefront errors."""

    status_code = 500

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class CheckoutValidationError(StoreError):
    """Malformed cart, payment details or paging arguments."""

    status_code = 400


class UnsupportedPaymentMethodError(StoreError):
    status_code = 400

    def __init__(self, method) -> None:
        super().__init__(f"Unsupported payment method: {method}", payment_method=method)
        self.method = method


class NotFoundError(StoreError):
    status_code = 404


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id) -> None:
        super().__init__(f"Customer {customer_id} not found", customer_id=str(customer_id))
        self.customer_id = customer_id


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id) -> None:
        super().__init__(f"Product {product_id} not found", product_id=str(product_id))
        self.product_id = product_id


class OrderNotFoundError(NotFoundError):
    # Same message whether the order is missing or owned by someone else
    def __init__(self, order_id) -> None:
        super().__init__(f"Order {order_id} not found", order_id=str(order_id))
        self.order_id = order_id


class InsufficientStockError(StoreError):
    status_code = 400

    def __init__(self, product_id, product_name, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} ({product_id}). Available: {available}, requested: {requested}",
            product_id=str(product_id),
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class PaymentRejectedError(StoreError):
    status_code = 400

    def __init__(self, reason: str, transaction_id: str | None = None) -> None:
        super().__init__(f"Payment rejected: {reason}")
        self.reason = reason
        self.transaction_id = transaction_id


class InternalError(StoreError):
    status_code = 500


class PaymentGatewayError(InternalError):
    """The processor misbehaved in a way that is neither a charge nor a decline."""


class ReconciliationRequiredError(InternalError):
    """A charge was captured but the order could not be recorded."""

    def __init__(self, reference: str, transaction_id: str | None) -> None:
        super().__init__(
            f"Payment {transaction_id} was captured but order {reference} could not be recorded; "
            "it has been flagged for reconciliation",
            reference=reference,
            transaction_id=transaction_id,
        )
        self.reference = reference
        self.transaction_id = transaction_id
