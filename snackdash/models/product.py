"""Product model."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Numeric, Text, JSON, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
import uuid

from snackdash.core.database import Base


class Product(Base):
    """Product model representing one menu entry of a tenant."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    # URI or data URI
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    extras: Mapped[List[dict]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        Index("ix_product_tenant_available", "tenant_id", "available"),
        CheckConstraint("price >= 0", name="price_non_negative"),
    )
