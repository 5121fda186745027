"""Customer-facing store endpoints: registration, menu, checkout, tracking."""
from fastapi import APIRouter, BackgroundTasks, status

from snackdash.core.config import settings
from snackdash.core.dependencies import CatalogDep, Directory, Pipeline, PublicTenant
from snackdash.core.logging import get_logger
from snackdash.core.notifier import OrderNotifier
from snackdash.schemas.order import (
    CheckoutRequest, CheckoutResponse, OrderResponse, OrderTrackingResponse,
)
from snackdash.schemas.product import MenuResponse, MenuSectionResponse
from snackdash.schemas.tenant import TenantCreateRequest, TenantPublicResponse, TenantResponse
from snackdash.services.orders import CustomerMeta, order_summary, whatsapp_link


router = APIRouter()
orders_router = APIRouter()
logger = get_logger(__name__)


def tenant_response(tenant) -> TenantResponse:
    response = TenantResponse.model_validate(tenant)
    response.store_url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/{tenant.slug}"
    return response


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def register_store(request: TenantCreateRequest, directory: Directory):
    """Register a new store. Starts active, open and on a trial plan."""
    tenant = await directory.create(
        name=request.name,
        slug=request.slug,
        contact=request.whatsapp_number,
        admin_password=request.password,
    )
    return tenant_response(tenant)


@router.get("/{slug}", response_model=TenantPublicResponse)
async def get_store(tenant: PublicTenant):
    """Public profile of an active store."""
    return TenantPublicResponse.model_validate(tenant)


@router.get("/{slug}/menu", response_model=MenuResponse)
async def get_menu(tenant: PublicTenant, catalog: CatalogDep):
    """Available products, sectioned by category."""
    sections = await catalog.menu(tenant)
    return MenuResponse(
        store=TenantPublicResponse.model_validate(tenant),
        sections=[MenuSectionResponse.model_validate(s) for s in sections],
    )


@router.post("/{slug}/orders", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    request: CheckoutRequest,
    tenant: PublicTenant,
    pipeline: Pipeline,
    background_tasks: BackgroundTasks,
):
    """
    Submit a cart as an order.
    - Prices come from the catalog at checkout, never from the client.
    - The WhatsApp hand-off is best-effort and runs after the order is stored.
    """
    cart = await pipeline.build_checkout_cart(
        tenant, [(line.product_id, line.quantity) for line in request.items]
    )
    order = await pipeline.submit(
        tenant,
        cart,
        CustomerMeta(
            name=request.customer_name,
            contact=request.customer_contact,
            delivery_method=request.delivery_method,
            table_number=request.table_number,
            pickup_time=request.pickup_time,
            address=request.address,
            notes=request.notes,
        ),
    )
    cart.clear()

    summary = order_summary(order)
    background_tasks.add_task(
        OrderNotifier.dispatch, tenant.id, order.id, tenant.whatsapp_number, summary
    )

    return CheckoutResponse(
        order=OrderResponse.model_validate(order),
        summary=summary,
        whatsapp_url=whatsapp_link(tenant, summary),
    )


@orders_router.get("/{order_id}", response_model=OrderTrackingResponse)
async def track_order(order_id: str, pipeline: Pipeline):
    """Order status for the customer who placed it."""
    order = await pipeline.get_public(order_id)
    return OrderTrackingResponse.model_validate(order)
