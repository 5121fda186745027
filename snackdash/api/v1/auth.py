"""Authentication API endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter

from snackdash.core.dependencies import Gate
from snackdash.core.logging import get_logger
from snackdash.schemas.auth import MasterLoginRequest, TenantLoginRequest, TokenResponse
from snackdash.services.auth import IssuedToken


router = APIRouter()
logger = get_logger(__name__)


def _token_response(issued: IssuedToken) -> TokenResponse:
    remaining = issued.expires_at - datetime.now(timezone.utc)
    return TokenResponse(
        access_token=issued.access_token,
        scope=issued.scope,
        tenant_id=issued.tenant_id,
        expires_at=issued.expires_at,
        expires_in=max(int(remaining.total_seconds()), 0),
    )


@router.post("/master", response_model=TokenResponse)
async def master_login(request: MasterLoginRequest, gate: Gate):
    """Exchange the platform master secret for a short-lived master token."""
    return _token_response(gate.login_master(request.secret))


@router.post("/stores/{slug}", response_model=TokenResponse)
async def tenant_admin_login(slug: str, request: TenantLoginRequest, gate: Gate):
    """Exchange a store's admin password for a token scoped to that store."""
    issued = await gate.login_tenant_admin(slug, request.password)
    return _token_response(issued)
