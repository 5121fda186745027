"""Application dependencies for dependency injection."""
from typing import Annotated, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from snackdash.core.database import get_db
from snackdash.core.exceptions import NotFound, Unauthorized
from snackdash.core.gateway import PersistenceGateway
from snackdash.models import Tenant
from snackdash.services.auth import AuthGate, Credential
from snackdash.services.catalog import Catalog
from snackdash.services.orders import OrderPipeline
from snackdash.services.tenants import TenantDirectory


security = HTTPBearer(auto_error=False)


async def get_gateway(db: AsyncSession = Depends(get_db)) -> PersistenceGateway:
    return PersistenceGateway(db)


Gateway = Annotated[PersistenceGateway, Depends(get_gateway)]


def get_directory(gateway: Gateway) -> TenantDirectory:
    return TenantDirectory(gateway)


def get_catalog(gateway: Gateway) -> Catalog:
    return Catalog(gateway)


def get_pipeline(gateway: Gateway) -> OrderPipeline:
    return OrderPipeline(gateway)


def get_auth_gate(gateway: Gateway) -> AuthGate:
    return AuthGate(gateway)


Directory = Annotated[TenantDirectory, Depends(get_directory)]
CatalogDep = Annotated[Catalog, Depends(get_catalog)]
Pipeline = Annotated[OrderPipeline, Depends(get_pipeline)]
Gate = Annotated[AuthGate, Depends(get_auth_gate)]


async def get_credential(
    gate: Gate,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Credential:
    """Validate the bearer token on every privileged request."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    return await gate.verify(credentials.credentials)


async def require_master(credential: Credential = Depends(get_credential)) -> Credential:
    return AuthGate.require_master(credential)


async def require_tenant_admin(credential: Credential = Depends(get_credential)) -> Tenant:
    """Resolve the tenant a tenant-admin token is scoped to."""
    return AuthGate.require_tenant(credential).tenant


MasterCredential = Annotated[Credential, Depends(require_master)]
AdminTenant = Annotated[Tenant, Depends(require_tenant_admin)]


async def get_public_tenant(slug: str, directory: Directory) -> Tenant:
    """Customer-facing tenant lookup; inactive stores look like missing ones."""
    tenant = await directory.resolve(slug)
    if not tenant.is_active:
        raise NotFound("Store not found")
    return tenant


PublicTenant = Annotated[Tenant, Depends(get_public_tenant)]
