"""Order model."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import String, DateTime, ForeignKey, Numeric, Text, JSON, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
import uuid

from snackdash.core.database import Base
from snackdash.core.enums import OrderStatus, DeliveryMethod


class Order(Base):
    """Order model. ``items`` and ``total`` are frozen at submission."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_contact: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    items: Mapped[List[dict]] = mapped_column(JSON, nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    delivery_method: Mapped[DeliveryMethod] = mapped_column(
        SQLEnum(DeliveryMethod),
        nullable=False
    )
    table_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    pickup_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus),
        default=OrderStatus.PENDING,
        nullable=False
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        Index("ix_order_tenant_created", "tenant_id", "created_at"),
        Index("ix_order_tenant_status", "tenant_id", "status"),
    )
