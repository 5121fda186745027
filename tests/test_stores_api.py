"""Customer-facing API tests: registration, menu, checkout and tracking."""
import pytest
from httpx import AsyncClient

from snackdash.services.tenants import TenantDirectory


@pytest.mark.asyncio
async def test_register_store(client: AsyncClient):
    response = await client.post("/api/v1/stores", json={
        "name": "Burger House",
        "slug": "Burger House!",
        "whatsapp_number": "+55 11 99999-9999",
        "password": "burger123",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "burger-house"
    assert data["plan"] == "TRIAL"
    assert data["trial_active"] is True
    assert data["store_url"].endswith("/burger-house")
    assert "admin_password_hash" not in data


@pytest.mark.asyncio
async def test_register_duplicate_slug(client: AsyncClient, tenant):
    response = await client.post("/api/v1/stores", json={
        "name": "Copycat",
        "slug": "BURGER-HOUSE",
        "whatsapp_number": "5511988887777",
        "password": "copy1234",
    })

    assert response.status_code == 409
    assert response.json()["field"] == "slug"


@pytest.mark.asyncio
async def test_register_reserved_slug(client: AsyncClient):
    response = await client.post("/api/v1/stores", json={
        "name": "Admin",
        "slug": "admin",
        "whatsapp_number": "5511988887777",
        "password": "admin1234",
    })

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_public_store_profile(client: AsyncClient, tenant):
    response = await client.get("/api/v1/stores/BURGER-HOUSE")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Burger House"
    assert "admin_password_hash" not in data
    assert "credentials_version" not in data


@pytest.mark.asyncio
async def test_unknown_store(client: AsyncClient):
    response = await client.get("/api/v1/stores/nowhere/menu")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_menu_sections(client: AsyncClient, tenant, products):
    response = await client.get("/api/v1/stores/burger-house/menu")

    assert response.status_code == 200
    data = response.json()
    assert data["store"]["slug"] == "burger-house"
    assert [s["category"] for s in data["sections"]] == ["Burgers", "Sides", "Drinks"]
    assert data["sections"][0]["products"][0]["name"] == "Classic Burger"


@pytest.mark.asyncio
async def test_checkout_and_track(client: AsyncClient, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [
            {"product_id": products["burger"].id, "quantity": 2},
            {"product_id": products["soda"].id, "quantity": 1},
        ],
        "customer_name": "Ana",
        "delivery_method": "DINE_IN",
        "table_number": "7",
    })

    assert response.status_code == 201
    data = response.json()
    order = data["order"]
    assert order["status"] == "PENDING"
    assert float(order["total"]) == 29.0
    assert "*Total: 29.00*" in data["summary"]
    assert data["whatsapp_url"].startswith("https://wa.me/5511999999999?text=")

    tracking = await client.get(f"/api/v1/orders/{order['id']}")
    assert tracking.status_code == 200
    assert tracking.json()["status"] == "PENDING"
    assert "customer_name" not in tracking.json()


@pytest.mark.asyncio
async def test_checkout_ignores_client_prices(client: AsyncClient, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [{"product_id": products["burger"].id, "quantity": 1, "unit_price": "0.01"}],
        "customer_name": "Ana",
        "delivery_method": "PICKUP",
        "pickup_time": "19:30",
    })

    assert response.status_code == 201
    assert float(response.json()["order"]["total"]) == 12.0


@pytest.mark.asyncio
async def test_checkout_empty_cart(client: AsyncClient, tenant):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [],
        "customer_name": "",
        "delivery_method": "DELIVERY",
    })

    assert response.status_code == 422
    assert response.json()["field"] == "items"


@pytest.mark.asyncio
async def test_checkout_delivery_needs_address(client: AsyncClient, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [{"product_id": products["fries"].id, "quantity": 1}],
        "customer_name": "Caio",
        "delivery_method": "DELIVERY",
    })

    assert response.status_code == 422
    assert response.json()["field"] == "address"


@pytest.mark.asyncio
async def test_checkout_unknown_delivery_method(client: AsyncClient, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [{"product_id": products["fries"].id, "quantity": 1}],
        "customer_name": "Caio",
        "delivery_method": "TELEPORT",
    })

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_track_unknown_order(client: AsyncClient):
    response = await client.get("/api/v1/orders/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_track_order_of_deactivated_store(client: AsyncClient, gateway, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [{"product_id": products["soda"].id, "quantity": 1}],
        "customer_name": "Ana",
        "delivery_method": "PICKUP",
        "pickup_time": "19:30",
    })
    order_id = response.json()["order"]["id"]
    assert (await client.get(f"/api/v1/orders/{order_id}")).status_code == 200

    await TenantDirectory(gateway).set_active(tenant.id, False)

    tracking = await client.get(f"/api/v1/orders/{order_id}")
    assert tracking.status_code == 404


@pytest.mark.asyncio
async def test_checkout_rejects_overlong_pickup_time(client: AsyncClient, tenant, products):
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [{"product_id": products["soda"].id, "quantity": 1}],
        "customer_name": "Ana",
        "delivery_method": "PICKUP",
        "pickup_time": "tomorrow " * 20,
    })

    assert response.status_code == 422
    assert response.json()["field"] == "pickup_time"


@pytest.mark.asyncio
async def test_checkout_merges_repeated_lines_before_quantity_limit(client: AsyncClient, tenant, products):
    line = {"product_id": products["soda"].id, "quantity": 60}
    response = await client.post("/api/v1/stores/burger-house/orders", json={
        "items": [line, line],
        "customer_name": "Ana",
        "delivery_method": "DINE_IN",
        "table_number": "7",
    })

    assert response.status_code == 422
    assert response.json()["field"] == "items"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
