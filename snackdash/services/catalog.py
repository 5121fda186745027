"""Per-tenant product catalog."""
import math
import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from snackdash.core.enums import DEFAULT_CATEGORIES
from snackdash.core.exceptions import NotFound, ValidationError
from snackdash.core.gateway import PersistenceGateway
from snackdash.core.logging import get_logger
from snackdash.models import Product, Tenant


logger = get_logger(__name__)

CENT = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")
EDITABLE_FIELDS = ("name", "price", "description", "image", "category", "available", "extras")


def parse_amount(value: Any, *, field_name: str = "price", allow_negative: bool = False) -> Decimal:
    """Parse a money amount; never coerces bad input to zero."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required", field=field_name)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    text = str(value).strip().replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number", field=field_name) from None
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    if amount < 0 and not allow_negative:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    try:
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{field_name} is too large", field=field_name) from None
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field_name} is too large", field=field_name)
    return amount


def parse_extras(raw: Optional[List[Any]]) -> List[dict]:
    extras = []
    for entry in raw or []:
        if hasattr(entry, "model_dump"):
            entry = entry.model_dump()
        name = (entry.get("name") or "").strip()
        if not name:
            raise ValidationError("Extra name is required", field="extras")
        delta = parse_amount(entry.get("price"), field_name="extras.price", allow_negative=True)
        extras.append({
            "id": entry.get("id") or uuid.uuid4().hex[:8],
            "name": name,
            "price": str(delta),
        })
    return extras


@dataclass
class MenuSection:
    category: str
    products: List[Product] = field(default_factory=list)


def section_menu(products: List[Product], categories: Optional[List[str]] = None) -> List[MenuSection]:
    """Group products under the category list, matching names case-insensitively.

    Products whose category is not in the list are left out.
    """
    sections = [MenuSection(category=name) for name in (categories or DEFAULT_CATEGORIES)]
    by_key = {}
    for section in sections:
        by_key.setdefault(section.category.strip().lower(), section)
    for product in products:
        section = by_key.get((product.category or "").strip().lower())
        if section is not None:
            section.products.append(product)
    return [s for s in sections if s.products]


class Catalog:
    """Product CRUD scoped to one tenant per call."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def list(self, tenant_id: str) -> List[Product]:
        """Every product, including unavailable and uncategorized ones."""
        return await self.gateway.fetch("products", {"tenant_id": tenant_id}, order_by="created_at")

    async def list_available(self, tenant: Tenant) -> List[Product]:
        if not tenant.is_active:
            raise NotFound("Store not found")
        return await self.gateway.fetch(
            "products",
            {"tenant_id": tenant.id, "available": True},
            order_by="created_at",
        )

    async def menu(self, tenant: Tenant) -> List[MenuSection]:
        """Customer view: available products of an active tenant, sectioned."""
        products = await self.list_available(tenant)
        return section_menu(products, tenant.categories)

    async def get(self, tenant_id: str, product_id: str) -> Product:
        product = await self.gateway.get("products", product_id)
        if product is None or product.tenant_id != tenant_id:
            raise NotFound("Product not found")
        return product

    def _clean(self, fields: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if "name" in fields or not partial:
            name = (fields.get("name") or "").strip()
            if not name:
                raise ValidationError("Product name is required", field="name")
            values["name"] = name
        if "price" in fields or not partial:
            values["price"] = parse_amount(fields.get("price"))
        if "description" in fields:
            values["description"] = (fields.get("description") or "").strip()
        if "image" in fields:
            values["image"] = fields.get("image") or None
        if "category" in fields:
            values["category"] = (fields.get("category") or "").strip()
        if "available" in fields and fields["available"] is not None:
            values["available"] = bool(fields["available"])
        if "extras" in fields:
            values["extras"] = parse_extras(fields.get("extras"))
        return values

    async def create(self, tenant_id: str, fields: Dict[str, Any]) -> Product:
        values = self._clean(fields, partial=False)
        values["tenant_id"] = tenant_id
        values.setdefault("available", True)
        product = await self.gateway.insert("products", values)
        logger.info(f"Product created: {product.name}", extra={"tenant_id": tenant_id, "product_id": product.id})
        return product

    async def update(self, tenant_id: str, product_id: str, fields: Dict[str, Any]) -> Product:
        await self.get(tenant_id, product_id)
        partial = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        values = self._clean(partial, partial=True)
        if values:
            await self.gateway.update("products", product_id, values)
        return await self.get(tenant_id, product_id)

    async def toggle_availability(self, tenant_id: str, product_id: str) -> Product:
        product = await self.get(tenant_id, product_id)
        await self.gateway.update("products", product_id, {"available": not product.available})
        return await self.get(tenant_id, product_id)

    async def delete(self, tenant_id: str, product_id: str) -> None:
        await self.get(tenant_id, product_id)
        await self.gateway.delete("products", product_id)
        logger.info("Product deleted", extra={"tenant_id": tenant_id, "product_id": product_id})
