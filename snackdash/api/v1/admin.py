"""Tenant admin endpoints: own store, catalog and orders."""
from typing import List, Optional
from fastapi import APIRouter, Query, status

from snackdash.api.v1.stores import tenant_response
from snackdash.core.dependencies import AdminTenant, CatalogDep, Directory, Gateway, Pipeline
from snackdash.core.enums import OrderStatus
from snackdash.core.logging import get_logger
from snackdash.schemas.order import AdminOrderResponse, AdvanceRequest, OrderListResponse
from snackdash.schemas.product import ProductCreateRequest, ProductResponse, ProductUpdateRequest
from snackdash.schemas.tenant import (
    OpenRequest, PasswordChangeRequest, TenantResponse, TenantStatsResponse, TenantUpdateRequest,
)
from snackdash.services.stats import tenant_stats


router = APIRouter()
logger = get_logger(__name__)


# Store

@router.get("/store", response_model=TenantResponse)
async def get_own_store(tenant: AdminTenant):
    return tenant_response(tenant)


@router.patch("/store", response_model=TenantResponse)
async def update_own_store(request: TenantUpdateRequest, tenant: AdminTenant, directory: Directory):
    """Edit name, WhatsApp number or category list."""
    updated = await directory.update_contact(tenant.id, request.model_dump(exclude_unset=True))
    return tenant_response(updated)


@router.put("/store/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_own_password(request: PasswordChangeRequest, tenant: AdminTenant, directory: Directory):
    """Rotate the admin password. Tokens issued before this stop working."""
    await directory.rotate_admin_password(tenant.id, request.new_password)


@router.put("/store/open", response_model=TenantResponse)
async def set_store_open(request: OpenRequest, tenant: AdminTenant, directory: Directory):
    """Open or close the store for new orders."""
    updated = await directory.set_open(tenant.id, request.is_open)
    return tenant_response(updated)


@router.get("/stats", response_model=TenantStatsResponse)
async def get_own_stats(tenant: AdminTenant, gateway: Gateway):
    return await tenant_stats(gateway, tenant.id)


# Products

@router.get("/products", response_model=List[ProductResponse])
async def list_products(tenant: AdminTenant, catalog: CatalogDep):
    """All products, including unavailable and uncategorized ones."""
    products = await catalog.list(tenant.id)
    return [ProductResponse.model_validate(p) for p in products]


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(request: ProductCreateRequest, tenant: AdminTenant, catalog: CatalogDep):
    product = await catalog.create(tenant.id, request.model_dump())
    return ProductResponse.model_validate(product)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, tenant: AdminTenant, catalog: CatalogDep):
    product = await catalog.get(tenant.id, product_id)
    return ProductResponse.model_validate(product)


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    tenant: AdminTenant,
    catalog: CatalogDep,
):
    product = await catalog.update(tenant.id, product_id, request.model_dump(exclude_unset=True))
    return ProductResponse.model_validate(product)


@router.post("/products/{product_id}/toggle", response_model=ProductResponse)
async def toggle_product(product_id: str, tenant: AdminTenant, catalog: CatalogDep):
    """Flip availability."""
    product = await catalog.toggle_availability(tenant.id, product_id)
    return ProductResponse.model_validate(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, tenant: AdminTenant, catalog: CatalogDep):
    await catalog.delete(tenant.id, product_id)


# Orders

@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    tenant: AdminTenant,
    pipeline: Pipeline,
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    active_only: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
):
    """List orders, newest first."""
    orders, total = await pipeline.list_for_tenant(
        tenant.id,
        status=status_filter,
        active_only=active_only,
        page=page,
        page_size=page_size,
    )
    return OrderListResponse(
        orders=[AdminOrderResponse.from_order(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/orders/{order_id}", response_model=AdminOrderResponse)
async def get_order(order_id: str, tenant: AdminTenant, pipeline: Pipeline):
    order = await pipeline.get_for_tenant(tenant.id, order_id)
    return AdminOrderResponse.from_order(order)


@router.post("/orders/{order_id}/advance", response_model=AdminOrderResponse)
async def advance_order(
    order_id: str,
    request: AdvanceRequest,
    tenant: AdminTenant,
    pipeline: Pipeline,
):
    """Move an order along its status machine."""
    order = await pipeline.advance(tenant.id, order_id, request.status)
    return AdminOrderResponse.from_order(order)
