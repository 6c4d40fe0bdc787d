"""FastAPI routes for the Ordering domain: orders and products."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CreateOrderRequest,
    IssueRefundRequest,
    OrderIdResponse,
    OrderStatusResponse,
    ProductIdResponse,
    RecordPaymentStatusRequest,
    RefundResponse,
    RegisterProductRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from ordering.order.creation import CreateOrder
from ordering.order.order import display_status
from ordering.order.payment import RecordPaymentStatus
from ordering.order.refund import issue_refund
from ordering.order.repository import load_order
from ordering.order.status import change_order_status
from ordering.product.registration import RegisterProduct
from ordering.product.stock import load_product
from ordering.shared.money import format_money
from ordering.utils.logging import add_context

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    command = CreateOrder(
        customer_id=body.customer_id,
        customer_email=body.customer_email,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        tax=body.tax,
        shipping=body.shipping,
        discount=body.discount,
        payment_method=body.payment_method,
        actor_id=body.actor_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    return load_order(order_id).to_snapshot()


@order_router.put("/{order_id}/payment", response_model=StatusResponse)
async def record_payment_status(order_id: str, body: RecordPaymentStatusRequest) -> StatusResponse:
    command = RecordPaymentStatus(
        order_id=order_id,
        payment_status=body.payment_status,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderStatusResponse:
    add_context(order_id=order_id, actor_id=body.actor_id)
    order = change_order_status(
        order_id=order_id,
        new_status=body.new_status,
        actor_id=body.actor_id,
        tracking_number=body.tracking_number,
        tracking_url=body.tracking_url,
        carrier=body.carrier,
        note=body.note,
    )
    return OrderStatusResponse(
        message=f"Order status updated to {display_status(order['status'])}",
        order=order,
    )


@order_router.post("/{order_id}/refunds", response_model=RefundResponse)
async def refund_order(order_id: str, body: IssueRefundRequest) -> RefundResponse:
    add_context(order_id=order_id, actor_id=body.actor_id)
    result = issue_refund(
        order_id=order_id,
        amount=body.amount,
        reason=body.reason,
        actor_id=body.actor_id,
    )
    refund = result["refund"]
    return RefundResponse(
        message=f"Refund of {format_money(refund['amount'])} processed successfully",
        order=result["order"],
        refund=refund,
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        name=body.name,
        sku=body.sku,
        price=body.price,
        stock_quantity=body.stock_quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    return load_product(product_id).to_dict()
