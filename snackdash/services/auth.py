"""AuthGate: credential verification and scoped tokens.

Two scopes, never shared. A master token cannot act as a tenant admin and a
tenant token only ever covers its own tenant. Tokens are checked on every
privileged call, including a re-read of the tenant for tenant-admin scope.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from snackdash.core.config import settings
from snackdash.core.enums import AuthScope
from snackdash.core.exceptions import NotFound, Unauthorized
from snackdash.core.gateway import PersistenceGateway
from snackdash.core.logging import get_logger
from snackdash.core.security import (
    create_access_token, decode_token, dummy_verify, get_password_hash, verify_password,
)
from snackdash.models import Tenant
from snackdash.services.tenants import TenantDirectory


logger = get_logger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    scope: AuthScope
    expires_at: datetime
    tenant_id: Optional[str] = None


@dataclass(frozen=True)
class Credential:
    """A verified token. ``tenant`` is loaded for tenant-admin scope."""
    scope: AuthScope
    tenant_id: Optional[str] = None
    tenant: Optional[Tenant] = None


_master_hash: Optional[str] = None


def master_secret_hash() -> str:
    """Hash of the platform master secret, computed once per process."""
    global _master_hash
    if _master_hash is None:
        if settings.MASTER_SECRET_HASH:
            _master_hash = settings.MASTER_SECRET_HASH
        elif settings.MASTER_SECRET:
            _master_hash = get_password_hash(settings.MASTER_SECRET)
        else:
            raise RuntimeError("MASTER_SECRET or MASTER_SECRET_HASH must be configured")
    return _master_hash


class AuthGate:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self.tenants = TenantDirectory(gateway)

    def authenticate_master(self, secret: str) -> bool:
        if not secret:
            dummy_verify()
            return False
        return verify_password(secret, master_secret_hash())

    async def _tenant_or_none(self, tenant_id: str) -> Optional[Tenant]:
        try:
            return await self.tenants.get(tenant_id)
        except NotFound:
            return None

    async def authenticate_tenant_admin(self, tenant_id: str, secret: str) -> bool:
        tenant = await self._tenant_or_none(tenant_id)
        return self._check_tenant_secret(tenant, secret)

    @staticmethod
    def _check_tenant_secret(tenant: Optional[Tenant], secret: str) -> bool:
        if tenant is None or not secret:
            dummy_verify()
            return False
        return verify_password(secret, tenant.admin_password_hash)

    def login_master(self, secret: str) -> IssuedToken:
        if not self.authenticate_master(secret):
            logger.warning("Failed master login attempt", extra={"scope": AuthScope.MASTER.value})
            raise Unauthorized()
        token, expires_at = create_access_token(AuthScope.MASTER)
        logger.info("Master token issued", extra={"scope": AuthScope.MASTER.value})
        return IssuedToken(access_token=token, scope=AuthScope.MASTER, expires_at=expires_at)

    async def login_tenant_admin(self, slug: str, secret: str) -> IssuedToken:
        try:
            tenant = await self.tenants.resolve(slug)
        except NotFound:
            tenant = None

        if not self._check_tenant_secret(tenant, secret) or not tenant.is_active:
            logger.warning(f"Failed tenant admin login for slug: {slug}")
            raise Unauthorized()

        token, expires_at = create_access_token(
            AuthScope.TENANT_ADMIN,
            tenant_id=tenant.id,
            credentials_version=tenant.credentials_version,
        )
        logger.info("Tenant admin token issued", extra={"tenant_id": tenant.id})
        return IssuedToken(
            access_token=token,
            scope=AuthScope.TENANT_ADMIN,
            expires_at=expires_at,
            tenant_id=tenant.id,
        )

    async def verify(self, token: str) -> Credential:
        payload = decode_token(token)
        if payload is None:
            raise Unauthorized()

        if payload.scope == AuthScope.MASTER:
            return Credential(scope=AuthScope.MASTER)

        if not payload.tenant_id:
            raise Unauthorized()
        tenant = await self._tenant_or_none(payload.tenant_id)
        if tenant is None or not tenant.is_active or tenant.credentials_version != payload.cv:
            raise Unauthorized()
        return Credential(scope=AuthScope.TENANT_ADMIN, tenant_id=tenant.id, tenant=tenant)

    @staticmethod
    def require_master(credential: Credential) -> Credential:
        if credential.scope != AuthScope.MASTER:
            raise Unauthorized()
        return credential

    @staticmethod
    def require_tenant(credential: Credential, tenant_id: Optional[str] = None) -> Credential:
        if credential.scope != AuthScope.TENANT_ADMIN:
            raise Unauthorized()
        if tenant_id is not None and credential.tenant_id != tenant_id:
            raise Unauthorized()
        return credential
