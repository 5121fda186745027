"""Tenant schemas."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field

from snackdash.core.enums import TenantPlan


class TenantCreateRequest(BaseModel):
    """Self-service store registration."""
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    whatsapp_number: str = Field(..., min_length=1, max_length=40)
    password: str = Field(..., min_length=1)


class TenantUpdateRequest(BaseModel):
    """Contact fields; slug is immutable."""
    name: Optional[str] = None
    whatsapp_number: Optional[str] = None
    categories: Optional[List[str]] = None


class PasswordChangeRequest(BaseModel):
    new_password: str = Field(..., min_length=1)


class ActiveRequest(BaseModel):
    active: bool


class OpenRequest(BaseModel):
    is_open: bool


class PlanRequest(BaseModel):
    plan: TenantPlan


class TenantPublicResponse(BaseModel):
    """What customers see of a store."""
    id: str
    slug: str
    name: str
    whatsapp_number: str
    is_open: bool
    categories: Optional[List[str]] = None

    class Config:
        from_attributes = True


class TenantResponse(BaseModel):
    """Tenant response schema for admins and the platform operator."""
    id: str
    slug: str
    name: str
    whatsapp_number: str
    plan: TenantPlan
    is_active: bool
    is_open: bool
    categories: Optional[List[str]] = None
    trial_expires_at: Optional[datetime] = None
    trial_active: bool
    created_at: datetime
    store_url: Optional[str] = None

    class Config:
        from_attributes = True


class BestSeller(BaseModel):
    name: str
    quantity: int


class TenantStatsResponse(BaseModel):
    gross_sales: Decimal
    order_count: int
    average_ticket: Decimal
    orders_by_status: dict
    best_sellers: List[BestSeller]


class PlatformStatsResponse(BaseModel):
    tenant_count: int
    active_tenant_count: int
    trial_tenant_count: int
    order_count: int
    gross_sales: Decimal
