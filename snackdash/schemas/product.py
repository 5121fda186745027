"""Product schemas."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Any
from pydantic import BaseModel, Field

from snackdash.schemas.tenant import TenantPublicResponse


class Extra(BaseModel):
    """Optional add-on with a price delta."""
    id: Optional[str] = None
    name: str
    price: Any = 0


class ProductCreateRequest(BaseModel):
    """Price stays loosely typed here; the catalog validates it."""
    name: str
    price: Any
    description: str = ""
    image: Optional[str] = None
    category: str = ""
    available: bool = True
    extras: List[Extra] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = None
    price: Any = None
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    available: Optional[bool] = None
    extras: Optional[List[Extra]] = None


class ExtraResponse(BaseModel):
    id: str
    name: str
    price: Decimal


class ProductResponse(BaseModel):
    """Product response schema."""
    id: str
    tenant_id: str
    name: str
    price: Decimal
    description: str
    image: Optional[str] = None
    category: str
    available: bool
    extras: List[ExtraResponse]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MenuSectionResponse(BaseModel):
    category: str
    products: List[ProductResponse]

    class Config:
        from_attributes = True


class MenuResponse(BaseModel):
    """Customer-facing menu of one store."""
    store: TenantPublicResponse
    sections: List[MenuSectionResponse]

