"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands.
"""

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    first_name: str
    last_name: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state_province: str
    postal_code: str
    country: str
    phone_number: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=1, le=99)
    unit_price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_id: str
    customer_email: str
    items: list[OrderItemSchema] = Field(min_length=1)
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    tax: float = Field(default=0.0, ge=0)
    shipping: float = Field(default=0.0, ge=0)
    discount: float = Field(default=0.0, ge=0)
    payment_method: str | None = None
    actor_id: str | None = None


class RecordPaymentStatusRequest(BaseModel):
    payment_status: str


class UpdateOrderStatusRequest(BaseModel):
    new_status: str
    actor_id: str
    tracking_number: str | None = None
    tracking_url: str | None = None
    carrier: str | None = None
    note: str | None = Field(default=None, max_length=200)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "new_status": "shipped",
                    "actor_id": "admin-001",
                    "tracking_number": "1Z999AA10123456784",
                    "carrier": "UPS",
                }
            ]
        }
    }


class IssueRefundRequest(BaseModel):
    # Left loose so malformed amounts reach the ledger's own validation.
    amount: Any = None
    reason: str | None = None
    actor_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 40.0,
                    "reason": "Damaged in transit",
                    "actor_id": "admin-001",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    name: str
    sku: str
    price: float = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderStatusResponse(BaseModel):
    success: bool = True
    message: str
    order: dict


class RefundResponse(BaseModel):
    success: bool = True
    message: str
    order: dict
    refund: dict


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
