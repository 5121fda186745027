"""Order schemas."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field

from snackdash.core.enums import OrderStatus, DeliveryMethod
from snackdash.services.orders import allowed_transitions


class CheckoutLine(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1, le=99)


class CheckoutRequest(BaseModel):
    """Cart lines plus customer metadata.

    Delivery details are checked by the order pipeline, not here, so every
    caller gets the same rules.
    """
    items: List[CheckoutLine] = Field(default_factory=list, max_length=100)
    customer_name: str = ""
    customer_contact: Optional[str] = None
    delivery_method: DeliveryMethod
    table_number: Optional[str] = None
    pickup_time: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class OrderResponse(BaseModel):
    """Order response schema."""
    id: str
    tenant_id: str
    customer_name: str
    customer_contact: Optional[str] = None
    items: List[OrderItemResponse]
    total: Decimal
    delivery_method: DeliveryMethod
    table_number: Optional[str] = None
    pickup_time: Optional[str] = None
    address: Optional[str] = None
    status: OrderStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdminOrderResponse(OrderResponse):
    """Adds the statuses the admin may move the order to next."""
    allowed_transitions: List[OrderStatus] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order) -> "AdminOrderResponse":
        response = cls.model_validate(order)
        response.allowed_transitions = allowed_transitions(order.status)
        return response


class CheckoutResponse(BaseModel):
    order: OrderResponse
    summary: str
    whatsapp_url: str


class OrderTrackingResponse(BaseModel):
    """Public tracking view: no customer contact details."""
    id: str
    status: OrderStatus
    delivery_method: DeliveryMethod
    items: List[OrderItemResponse]
    total: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdvanceRequest(BaseModel):
    status: OrderStatus


class OrderListResponse(BaseModel):
    orders: List[AdminOrderResponse]
    total: int
    page: int
    page_size: int
