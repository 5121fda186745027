"""Persistence gateway tests: failure mapping and retry policy."""
import asyncio

import pytest
from sqlalchemy.exc import DataError, OperationalError

from snackdash.core.exceptions import Conflict, Transient, ValidationError
from snackdash.core.gateway import PersistenceGateway


def _operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection reset"))


@pytest.mark.asyncio
async def test_fetch_filters_and_orders(gateway, tenant, products):
    rows = await gateway.fetch(
        "products",
        {"tenant_id": tenant.id, "id": [products["soda"].id, products["fries"].id]},
        order_by="name",
    )
    assert [p.name for p in rows] == ["Fries", "Soda"]


@pytest.mark.asyncio
async def test_get_missing_returns_none(gateway):
    assert await gateway.get("orders", "nope") is None


@pytest.mark.asyncio
async def test_insert_ignores_caller_id(gateway, tenant):
    product = await gateway.insert("products", {
        "id": "chosen-by-caller", "tenant_id": tenant.id, "name": "Water", "price": 2,
    })
    assert product.id != "chosen-by-caller"


@pytest.mark.asyncio
async def test_update_with_expected_values(gateway, tenant, products):
    soda = products["soda"]

    assert await gateway.update("products", soda.id, {"name": "Cola"}, expected={"name": "Soda"})
    assert not await gateway.update("products", soda.id, {"name": "Lemonade"}, expected={"name": "Soda"})
    assert (await gateway.get("products", soda.id)).name == "Cola"


@pytest.mark.asyncio
async def test_unknown_collection(gateway):
    with pytest.raises(ValueError):
        await gateway.fetch("warehouses")


@pytest.mark.asyncio
async def test_unique_violation_becomes_conflict(gateway, tenant):
    with pytest.raises(Conflict):
        await gateway.insert("tenants", {
            "slug": tenant.slug,
            "name": "Copy",
            "whatsapp_number": "5511988887777",
            "admin_password_hash": "x",
        })


@pytest.mark.asyncio
async def test_slow_read_times_out_after_retry(db_session, tenant, monkeypatch):
    gateway = PersistenceGateway(db_session, timeout=0.05, read_retries=1, backoff=0)
    attempts = []

    async def slow_execute(*args, **kwargs):
        attempts.append(1)
        await asyncio.sleep(1)

    monkeypatch.setattr(db_session, "execute", slow_execute)

    with pytest.raises(Transient):
        await gateway.fetch("tenants")
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_read_recovers_on_retry(db_session, tenant, monkeypatch):
    gateway = PersistenceGateway(db_session, read_retries=1, backoff=0)
    real_execute = db_session.execute
    attempts = []

    async def flaky_execute(*args, **kwargs):
        attempts.append(1)
        if len(attempts) == 1:
            raise _operational_error()
        return await real_execute(*args, **kwargs)

    monkeypatch.setattr(db_session, "execute", flaky_execute)

    rows = await gateway.fetch("tenants")
    assert [t.id for t in rows] == [tenant.id]
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_writes_are_not_retried(db_session, tenant, monkeypatch):
    gateway = PersistenceGateway(db_session, read_retries=3, backoff=0)
    attempts = []

    async def broken_execute(*args, **kwargs):
        attempts.append(1)
        raise _operational_error()

    monkeypatch.setattr(db_session, "execute", broken_execute)

    with pytest.raises(Transient):
        await gateway.update("tenants", tenant.id, {"name": "Renamed"})
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_value_rejected_by_column_becomes_validation_error(db_session, tenant, monkeypatch):
    gateway = PersistenceGateway(db_session, backoff=0)
    real_execute = db_session.execute
    rejected = []

    async def strict_execute(statement, *args, **kwargs):
        if not rejected:
            rejected.append(statement)
            raise DataError("UPDATE tenants", {}, Exception("value too long for type character varying(255)"))
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", strict_execute)

    with pytest.raises(ValidationError):
        await gateway.update("tenants", tenant.id, {"name": "N" * 300})

    # Session was rolled back and stays usable
    assert (await gateway.get("tenants", tenant.id)).name == "Burger House"
