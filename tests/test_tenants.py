"""Tenant directory tests."""
from datetime import datetime, timezone

import pytest

from snackdash.core.enums import DeliveryMethod, TenantPlan
from snackdash.core.exceptions import Conflict, NotFound, ValidationError
from snackdash.services.catalog import Catalog
from snackdash.services.orders import CustomerMeta, OrderPipeline
from snackdash.services.tenants import TenantDirectory, normalize_contact, normalize_slug, validate_slug


@pytest.mark.parametrize("raw, expected", [
    ("Burger House!", "burger-house"),
    ("  Café   Lanches ", "cafe-lanches"),
    ("--hot--dog--", "hot-dog"),
    ("Snack_Bar 24h", "snackbar-24h"),
])
def test_normalize_slug(raw, expected):
    assert normalize_slug(raw) == expected


@pytest.mark.parametrize("raw", ["", "!!!", "ab", "admin", "API", "x" * 64])
def test_validate_slug_rejects(raw):
    with pytest.raises(ValidationError) as exc:
        validate_slug(raw)
    assert exc.value.field == "slug"


def test_normalize_contact_keeps_digits():
    assert normalize_contact("+55 (11) 99999-8888") == "5511999998888"
    with pytest.raises(ValidationError):
        normalize_contact("123")


@pytest.mark.asyncio
async def test_create_tenant_defaults(gateway):
    tenant = await TenantDirectory(gateway).create(
        name="Burger House", slug="Burger House!", contact="+55 11 99999-9999", admin_password="burger123"
    )

    assert tenant.slug == "burger-house"
    assert tenant.whatsapp_number == "5511999999999"
    assert tenant.plan == TenantPlan.TRIAL
    assert tenant.is_active is True
    assert tenant.is_open is True
    assert tenant.credentials_version == 1
    assert tenant.admin_password_hash != "burger123"
    assert tenant.trial_active is True


@pytest.mark.asyncio
async def test_duplicate_slug_conflicts_regardless_of_case(gateway, tenant):
    directory = TenantDirectory(gateway)

    with pytest.raises(Conflict) as exc:
        await directory.create(
            name="Other", slug="BURGER-HOUSE", contact="5511988887777", admin_password="other123"
        )
    assert exc.value.field == "slug"

    # Session is still usable after the constraint violation
    assert len(await directory.list_all()) == 1


@pytest.mark.asyncio
async def test_create_rejects_short_password(gateway):
    with pytest.raises(ValidationError) as exc:
        await TenantDirectory(gateway).create(
            name="Tiny", slug="tiny-shop", contact="5511988887777", admin_password="abc"
        )
    assert exc.value.field == "password"


@pytest.mark.asyncio
async def test_resolve_is_case_insensitive(gateway, tenant):
    directory = TenantDirectory(gateway)
    assert (await directory.resolve("BURGER-HOUSE")).id == tenant.id
    assert (await directory.resolve("  burger-house ")).id == tenant.id


@pytest.mark.asyncio
async def test_resolve_unknown_slug(gateway):
    with pytest.raises(NotFound):
        await TenantDirectory(gateway).resolve("nowhere")


@pytest.mark.asyncio
async def test_list_all_newest_first(gateway, tenant):
    directory = TenantDirectory(gateway)
    newer = await directory.create(
        name="Dog Stand", slug="dog-stand", contact="5511988887777", admin_password="dogs1234"
    )
    await directory.set_active(newer.id, False)

    tenants = await directory.list_all()
    assert [t.slug for t in tenants] == ["dog-stand", "burger-house"]


@pytest.mark.asyncio
async def test_update_contact_keeps_slug(gateway, tenant):
    updated = await TenantDirectory(gateway).update_contact(tenant.id, {
        "name": "Burger House II",
        "whatsapp_number": "55 11 97777 6666",
        "categories": ["Burgers", "burgers", " Drinks ", ""],
    })

    assert updated.name == "Burger House II"
    assert updated.whatsapp_number == "5511977776666"
    assert updated.categories == ["Burgers", "Drinks"]
    assert updated.slug == "burger-house"


@pytest.mark.asyncio
async def test_set_plan_and_open(gateway, tenant):
    directory = TenantDirectory(gateway)

    updated = await directory.set_plan(tenant.id, TenantPlan.PRO)
    assert updated.plan == TenantPlan.PRO
    assert updated.trial_active is False

    closed = await directory.set_open(tenant.id, False)
    assert closed.is_open is False


@pytest.mark.asyncio
async def test_rotate_password_bumps_credentials_version(gateway, tenant):
    before = tenant.credentials_version
    rotated = await TenantDirectory(gateway).rotate_admin_password(tenant.id, "new-secret")
    assert rotated.credentials_version == before + 1


@pytest.mark.asyncio
async def test_rotate_password_loses_race_to_concurrent_rotation(gateway, tenant, monkeypatch):
    before = tenant.credentials_version
    real_update = gateway.update
    seen = []

    async def racing_update(collection, record_id, values, expected=None):
        seen.append(expected)
        # Another operator rotates in between our read and our write
        await real_update(collection, record_id, {"credentials_version": before + 1})
        return await real_update(collection, record_id, values, expected=expected)

    monkeypatch.setattr(gateway, "update", racing_update)

    with pytest.raises(Conflict):
        await TenantDirectory(gateway).rotate_admin_password(tenant.id, "new-secret")

    assert seen == [{"credentials_version": before}]
    assert (await gateway.get("tenants", tenant.id)).credentials_version == before + 1


@pytest.mark.asyncio
async def test_unknown_tenant_operations(gateway):
    directory = TenantDirectory(gateway)
    with pytest.raises(NotFound):
        await directory.set_active("missing", True)
    with pytest.raises(NotFound):
        await directory.delete("missing")


@pytest.mark.asyncio
async def test_delete_cascades_products_and_orders(gateway, tenant, products):
    directory = TenantDirectory(gateway)
    pipeline = OrderPipeline(gateway)
    cart = await pipeline.build_checkout_cart(tenant, [(products["soda"].id, 1)])
    await pipeline.submit(tenant, cart, CustomerMeta(name="Ana", delivery_method=DeliveryMethod.PICKUP, pickup_time="19:30"))

    await directory.delete(tenant.id)

    with pytest.raises(NotFound):
        await directory.resolve("burger-house")
    assert await Catalog(gateway).list(tenant.id) == []
    assert await gateway.count("products", {"tenant_id": tenant.id}) == 0
    assert await gateway.count("orders", {"tenant_id": tenant.id}) == 0


@pytest.mark.asyncio
async def test_trial_active_handles_naive_datetimes(tenant):
    tenant.trial_expires_at = datetime(2000, 1, 1)
    assert tenant.trial_active is False
    tenant.trial_expires_at = datetime(2999, 1, 1, tzinfo=timezone.utc)
    assert tenant.trial_active is True
