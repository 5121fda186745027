"""Tenant model for multi-tenancy."""
from datetime import datetime, timezone
from typing import Optional, List
from sqlalchemy import String, Boolean, DateTime, Integer, JSON, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
import uuid

from snackdash.core.database import Base
from snackdash.core.enums import TenantPlan


class Tenant(Base):
    """Tenant model representing one vendor storefront."""

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    slug: Mapped[str] = mapped_column(String(63), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    whatsapp_number: Mapped[str] = mapped_column(String(20), nullable=False)
    admin_password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # Bumped on password rotation so older tokens stop working
    credentials_version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    plan: Mapped[TenantPlan] = mapped_column(
        SQLEnum(TenantPlan),
        default=TenantPlan.TRIAL,
        nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    categories: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    trial_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        Index("ix_tenant_slug_unique", "slug", unique=True),
        Index("ix_tenant_created_at", "created_at"),
    )

    @property
    def trial_active(self) -> bool:
        if self.plan != TenantPlan.TRIAL or self.trial_expires_at is None:
            return False
        expires = self.trial_expires_at
        # SQLite hands back naive datetimes
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires > datetime.now(timezone.utc)
