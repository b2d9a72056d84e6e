"""FastAPI endpoints for the storefront."""

import os

from fastapi import APIRouter, Depends, HTTPException, Query
from protean.utils.globals import current_domain

from storefront.api.auth import get_access_tokens, require_customer
from storefront.api.schemas import (
    AddProductRequest,
    ChangePriceRequest,
    CheckoutRequest,
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    OrderPageResponse,
    OrderResponse,
    ProductIdResponse,
    ProductResponse,
    RegisterCustomerRequest,
    RegisteredCustomerResponse,
    RestockRequest,
    StatusResponse,
    TransactionStatusResponse,
)
from storefront.catalogue.management import AddProduct, ChangeProductPrice, RestockProduct
from storefront.catalogue.product import Product
from storefront.identity.registration import RegisterCustomer
from storefront.identity.tokens import AccessTokens
from storefront.ordering.checkout.engine import LineItem, OrderTransactionEngine, PaymentDetails
from storefront.ordering.checkout.settings import CheckoutSettings
from storefront.ordering.queries import DEFAULT_PAGE_SIZE, OrderQueryService
from storefront.payments.gateway import get_registry
from storefront.payments.gateway.fake_adapter import FakeCardGateway
from storefront.payments.gateway.port import CardDetails, PaymentMethod


def get_engine() -> OrderTransactionEngine:
    return OrderTransactionEngine(get_registry(), CheckoutSettings.from_env())


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def place_order(
    body: CheckoutRequest,
    customer_id: str = Depends(require_customer),
    engine: OrderTransactionEngine = Depends(get_engine),
) -> OrderResponse:
    order = engine.place_order(
        customer_id,
        [LineItem(product_id=item.product_id, quantity=item.quantity) for item in body.items],
        PaymentDetails(
            method=body.payment_method,
            card=CardDetails(
                number=body.card_number,
                cvv=body.cvv,
                expiry_month=body.expiration_month,
                expiry_year=body.expiration_year,
                holder_name=body.full_name,
            ),
            currency=body.currency,
            description=body.description,
        ),
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=OrderPageResponse)
def list_orders(
    page: int = Query(default=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE),
    customer_id: str = Depends(require_customer),
) -> OrderPageResponse:
    result = OrderQueryService().list_orders(customer_id, page=page, page_size=page_size)
    return OrderPageResponse(
        items=[OrderResponse.from_order(order) for order in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, customer_id: str = Depends(require_customer)) -> OrderResponse:
    order = OrderQueryService().get_order(order_id, customer_id)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=RegisteredCustomerResponse)
def register_customer(
    body: RegisterCustomerRequest,
    tokens: AccessTokens = Depends(get_access_tokens),
) -> RegisteredCustomerResponse:
    command = RegisterCustomer(name=body.name, email=body.email)
    customer_id = current_domain.process(command, asynchronous=False)
    return RegisteredCustomerResponse(customer_id=customer_id, access_token=tokens.issue(customer_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        sku=body.sku,
        description=body.description,
        price=body.price,
        stock=body.stock,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        sku=product.sku,
        description=product.description,
        price=product.price,
        stock=product.stock,
    )


@product_router.put("/{product_id}/price", response_model=StatusResponse)
def change_product_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    current_domain.process(ChangeProductPrice(product_id=product_id, price=body.price), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
def restock_product(product_id: str, body: RestockRequest) -> StatusResponse:
    current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.get("/transactions/{transaction_id}", response_model=TransactionStatusResponse)
def get_transaction(transaction_id: str) -> TransactionStatusResponse:
    """Ask the processor about a charge, e.g. one behind a reconciliation item."""
    gateway = get_registry().for_method(PaymentMethod.CREDIT_CARD)
    status = gateway.query_transaction(transaction_id)
    return TransactionStatusResponse(
        transaction_id=status.transaction_id,
        status=status.status,
        amount=status.amount,
        currency=status.currency,
        message=status.message,
    )


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeCardGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_registry().for_method(PaymentMethod.CREDIT_CARD)
    if not isinstance(gateway, FakeCardGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeCardGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
