"""Pydantic request/response schemas for the storefront API.

These are external contracts, separate from the Protean aggregates and the
engine's own value types. Shape problems are rejected here, before the
checkout ever runs.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from storefront.payments.gateway.port import PaymentMethod
from storefront.shared.money import SUPPORTED_CURRENCIES


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CheckoutItemSchema(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class CheckoutRequest(BaseModel):
    items: list[CheckoutItemSchema] = Field(min_length=1)
    payment_method: str
    card_number: str = Field(pattern=r"^\d{12,19}$")
    cvv: str = Field(pattern=r"^\d{3,4}$")
    expiration_month: int = Field(ge=1, le=12)
    expiration_year: int = Field(ge=2000, le=2100)
    full_name: str = Field(min_length=1, max_length=255)
    currency: str | None = None
    description: str | None = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "payment_method": "credit_card",
                    "card_number": "4242424242424242",
                    "cvv": "123",
                    "expiration_month": 12,
                    "expiration_year": 2030,
                    "full_name": "Jane Doe",
                    "currency": "USD",
                }
            ]
        }
    }

    @field_validator("payment_method")
    @classmethod
    def payment_method_must_be_known(cls, value: str) -> str:
        tag = value.strip().lower()
        if tag not in {method.value for method in PaymentMethod}:
            raise ValueError(f"Unsupported payment method: {value}")
        return tag

    @field_validator("currency")
    @classmethod
    def currency_must_be_supported(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value.upper() not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {value}")
        return value.upper()


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    reference: str
    status: str
    total_amount: float
    currency: str
    transaction_id: str | None = None
    payment_method: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            reference=order.reference,
            status=order.status,
            total_amount=order.total_amount,
            currency=order.currency,
            transaction_id=order.transaction_id,
            payment_method=order.payment_method,
            description=order.description,
            created_at=order.created_at,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
        )


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
class RegisterCustomerRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=254)


class RegisteredCustomerResponse(BaseModel):
    customer_id: str
    access_token: str
    token_type: str = "bearer"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    sku: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=1000)
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)


class ChangePriceRequest(BaseModel):
    price: float = Field(ge=0)


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    sku: str | None = None
    description: str | None = None
    price: float
    stock: int


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class TransactionStatusResponse(BaseModel):
    transaction_id: str
    status: str
    amount: float | None = None
    currency: str | None = None
    message: str | None = None


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card declined"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


class StatusResponse(BaseModel):
    status: str = "ok"
