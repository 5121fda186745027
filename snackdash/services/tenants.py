"""Tenant directory: slug resolution, registration and lifecycle."""
import re
import unicodedata
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from snackdash.core.config import settings
from snackdash.core.enums import TenantPlan
from snackdash.core.exceptions import Conflict, NotFound, ValidationError
from snackdash.core.gateway import PersistenceGateway
from snackdash.core.logging import get_logger
from snackdash.core.security import get_password_hash
from snackdash.models import Tenant


logger = get_logger(__name__)

SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 63
RESERVED_SLUGS = frozenset({"master", "admin", "api", "static"})
MIN_PASSWORD_LENGTH = 4

_SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def normalize_slug(raw: str) -> str:
    """'Burger House!' -> 'burger-house'."""
    text = unicodedata.normalize("NFKD", raw or "")
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"\s+", "-", text.strip())
    text = re.sub(r"[^a-z0-9-]", "", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


def validate_slug(raw: str) -> str:
    slug = normalize_slug(raw)
    if not slug or not _SLUG_RE.match(slug):
        raise ValidationError("Store identifier must contain letters or digits", field="slug")
    if len(slug) < SLUG_MIN_LENGTH or len(slug) > SLUG_MAX_LENGTH:
        raise ValidationError(
            f"Store identifier must be {SLUG_MIN_LENGTH}-{SLUG_MAX_LENGTH} characters",
            field="slug",
        )
    if slug in RESERVED_SLUGS:
        raise ValidationError("Store identifier is reserved", field="slug")
    return slug


def normalize_contact(raw: str) -> str:
    """Keep digits only, as WhatsApp deep links expect."""
    digits = re.sub(r"\D", "", raw or "")
    if not 8 <= len(digits) <= 15:
        raise ValidationError("WhatsApp number must have 8 to 15 digits", field="whatsapp_number")
    return digits


def validate_password(raw: str) -> str:
    password = (raw or "").strip()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must have at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    return password


def _clean_name(raw: str) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError("Store name is required", field="name")
    return name


def _clean_categories(raw: Optional[List[str]]) -> Optional[List[str]]:
    if raw is None:
        return None
    seen = set()
    categories = []
    for value in raw:
        name = (value or "").strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            categories.append(name)
    return categories or None


class TenantDirectory:
    """Resolves and manages tenants through the persistence gateway."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def resolve(self, slug: str) -> Tenant:
        """Case-insensitive lookup by slug."""
        key = (slug or "").strip().lower()
        rows = await self.gateway.fetch("tenants", {"slug": key}, limit=1) if key else []
        if not rows:
            raise NotFound("Store not found")
        return rows[0]

    async def get(self, tenant_id: str) -> Tenant:
        tenant = await self.gateway.get("tenants", tenant_id)
        if tenant is None:
            raise NotFound("Store not found")
        return tenant

    async def list_all(self) -> List[Tenant]:
        return await self.gateway.fetch("tenants", order_by="created_at", descending=True)

    async def create(self, name: str, slug: str, contact: str, admin_password: str) -> Tenant:
        """Register a tenant. The unique index on slug is the only collision check."""
        values = {
            "name": _clean_name(name),
            "slug": validate_slug(slug),
            "whatsapp_number": normalize_contact(contact),
            "admin_password_hash": get_password_hash(validate_password(admin_password)),
            "credentials_version": 1,
            "plan": TenantPlan.TRIAL,
            "is_active": True,
            "is_open": True,
            "trial_expires_at": datetime.now(timezone.utc) + timedelta(days=settings.TRIAL_DAYS),
        }
        try:
            tenant = await self.gateway.insert("tenants", values)
        except Conflict:
            raise Conflict("Store identifier already taken", field="slug") from None

        logger.info(f"Tenant created: {tenant.slug}", extra={"tenant_id": tenant.id})
        return tenant

    async def _apply(self, tenant_id: str, values: Dict[str, Any]) -> Tenant:
        if not await self.gateway.update("tenants", tenant_id, values):
            raise NotFound("Store not found")
        return await self.get(tenant_id)

    async def set_active(self, tenant_id: str, active: bool) -> Tenant:
        tenant = await self._apply(tenant_id, {"is_active": bool(active)})
        logger.info(f"Tenant active={tenant.is_active}", extra={"tenant_id": tenant_id})
        return tenant

    async def set_open(self, tenant_id: str, is_open: bool) -> Tenant:
        return await self._apply(tenant_id, {"is_open": bool(is_open)})

    async def set_plan(self, tenant_id: str, plan: TenantPlan) -> Tenant:
        return await self._apply(tenant_id, {"plan": TenantPlan(plan)})

    async def update_contact(self, tenant_id: str, fields: Dict[str, Any]) -> Tenant:
        """Update name, whatsapp number and/or category list. Slug is immutable."""
        values: Dict[str, Any] = {}
        if fields.get("name") is not None:
            values["name"] = _clean_name(fields["name"])
        if fields.get("whatsapp_number") is not None:
            values["whatsapp_number"] = normalize_contact(fields["whatsapp_number"])
        if "categories" in fields:
            values["categories"] = _clean_categories(fields["categories"])
        if not values:
            return await self.get(tenant_id)
        return await self._apply(tenant_id, values)

    async def rotate_admin_password(self, tenant_id: str, new_password: str) -> Tenant:
        """Replace the admin secret and invalidate tokens issued for the old one."""
        tenant = await self.get(tenant_id)
        current = tenant.credentials_version
        values = {
            "admin_password_hash": get_password_hash(validate_password(new_password)),
            "credentials_version": current + 1,
        }
        # Concurrent rotations must each move the version, never share one
        if not await self.gateway.update(
            "tenants", tenant_id, values, expected={"credentials_version": current}
        ):
            raise Conflict("Credentials were changed by someone else, please retry")
        tenant = await self.get(tenant_id)
        logger.info("Tenant admin password rotated", extra={"tenant_id": tenant_id})
        return tenant

    async def delete(self, tenant_id: str) -> None:
        """Irreversible; products and orders go with it."""
        if not await self.gateway.delete("tenants", tenant_id):
            raise NotFound("Store not found")
        logger.warning("Tenant deleted", extra={"tenant_id": tenant_id})
