"""Authentication schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from snackdash.core.enums import AuthScope


class MasterLoginRequest(BaseModel):
    """Platform master login."""
    secret: str = Field(..., min_length=1)


class TenantLoginRequest(BaseModel):
    """Tenant admin login."""
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Token response schema."""
    access_token: str
    token_type: str = "bearer"
    scope: AuthScope
    tenant_id: Optional[str] = None
    expires_at: datetime
    expires_in: int  # seconds
