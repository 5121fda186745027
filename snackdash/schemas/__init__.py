"""Pydantic schemas."""
from snackdash.schemas.auth import MasterLoginRequest, TenantLoginRequest, TokenResponse
from snackdash.schemas.tenant import (
    TenantCreateRequest, TenantUpdateRequest, TenantResponse, TenantPublicResponse,
    TenantStatsResponse, PlatformStatsResponse,
)
from snackdash.schemas.product import (
    ProductCreateRequest, ProductUpdateRequest, ProductResponse, MenuResponse
)
from snackdash.schemas.order import (
    CheckoutRequest, CheckoutResponse, OrderResponse, AdminOrderResponse,
    OrderListResponse, OrderTrackingResponse, AdvanceRequest,
)

__all__ = [
    "MasterLoginRequest", "TenantLoginRequest", "TokenResponse",
    "TenantCreateRequest", "TenantUpdateRequest", "TenantResponse", "TenantPublicResponse",
    "TenantStatsResponse", "PlatformStatsResponse",
    "ProductCreateRequest", "ProductUpdateRequest", "ProductResponse", "MenuResponse",
    "CheckoutRequest", "CheckoutResponse", "OrderResponse", "AdminOrderResponse",
    "OrderListResponse", "OrderTrackingResponse", "AdvanceRequest",
]
