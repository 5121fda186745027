"""Platform master endpoints: tenant provisioning and aggregate stats."""
from typing import List
from fastapi import APIRouter, status

from snackdash.api.v1.stores import tenant_response
from snackdash.core.dependencies import Directory, Gateway, MasterCredential
from snackdash.core.logging import get_logger
from snackdash.schemas.tenant import (
    ActiveRequest, PasswordChangeRequest, PlanRequest, PlatformStatsResponse,
    TenantResponse, TenantUpdateRequest,
)
from snackdash.services.stats import platform_stats


router = APIRouter()
logger = get_logger(__name__)


@router.get("/tenants", response_model=List[TenantResponse])
async def list_tenants(_: MasterCredential, directory: Directory):
    """Every tenant, inactive ones included, newest first."""
    return [tenant_response(t) for t in await directory.list_all()]


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: str, _: MasterCredential, directory: Directory):
    return tenant_response(await directory.get(tenant_id))


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str,
    request: TenantUpdateRequest,
    _: MasterCredential,
    directory: Directory,
):
    tenant = await directory.update_contact(tenant_id, request.model_dump(exclude_unset=True))
    return tenant_response(tenant)


@router.put("/tenants/{tenant_id}/active", response_model=TenantResponse)
async def set_tenant_active(
    tenant_id: str,
    request: ActiveRequest,
    _: MasterCredential,
    directory: Directory,
):
    return tenant_response(await directory.set_active(tenant_id, request.active))


@router.put("/tenants/{tenant_id}/plan", response_model=TenantResponse)
async def set_tenant_plan(
    tenant_id: str,
    request: PlanRequest,
    _: MasterCredential,
    directory: Directory,
):
    return tenant_response(await directory.set_plan(tenant_id, request.plan))


@router.put("/tenants/{tenant_id}/password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_tenant_password(
    tenant_id: str,
    request: PasswordChangeRequest,
    _: MasterCredential,
    directory: Directory,
):
    """Reset a store's admin password, e.g. when the owner lost it."""
    await directory.rotate_admin_password(tenant_id, request.new_password)


@router.delete("/tenants/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(tenant_id: str, _: MasterCredential, directory: Directory):
    """Delete a tenant with all its products and orders. Irreversible."""
    await directory.delete(tenant_id)


@router.get("/stats", response_model=PlatformStatsResponse)
async def get_platform_stats(_: MasterCredential, gateway: Gateway):
    return await platform_stats(gateway)
