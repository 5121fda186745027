"""Test configuration and fixtures."""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("MASTER_SECRET", "master-test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio
from typing import AsyncGenerator, Dict
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from snackdash.main import app
from snackdash.core.database import build_engine, build_session_maker, create_tables, drop_tables, get_db
from snackdash.core.gateway import PersistenceGateway
from snackdash.models import Tenant, Product
from snackdash.services.auth import AuthGate
from snackdash.services.catalog import Catalog
from snackdash.services.tenants import TenantDirectory


MASTER_SECRET = os.environ["MASTER_SECRET"]
ADMIN_PASSWORD = "burger123"

# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = build_engine(TEST_DATABASE_URL)
TestSessionLocal = build_session_maker(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    await create_tables(test_engine)

    async with TestSessionLocal() as session:
        yield session

    await drop_tables(test_engine)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def gateway(db_session: AsyncSession) -> PersistenceGateway:
    return PersistenceGateway(db_session, backoff=0)


@pytest_asyncio.fixture
async def tenant(gateway: PersistenceGateway) -> Tenant:
    """Active, open trial store."""
    return await TenantDirectory(gateway).create(
        name="Burger House",
        slug="burger-house",
        contact="+55 11 99999-9999",
        admin_password=ADMIN_PASSWORD,
    )


@pytest_asyncio.fixture
async def products(gateway: PersistenceGateway, tenant: Tenant) -> Dict[str, Product]:
    """A small menu keyed by a short name."""
    catalog = Catalog(gateway)
    return {
        "burger": await catalog.create(tenant.id, {
            "name": "Classic Burger", "price": "12.00", "category": "Burgers",
        }),
        "fries": await catalog.create(tenant.id, {
            "name": "Fries", "price": "7.50", "category": "Sides",
        }),
        "soda": await catalog.create(tenant.id, {
            "name": "Soda", "price": "5.00", "category": "Drinks",
        }),
    }


@pytest_asyncio.fixture
async def master_headers(gateway: PersistenceGateway) -> dict:
    issued = AuthGate(gateway).login_master(MASTER_SECRET)
    return {"Authorization": f"Bearer {issued.access_token}"}


@pytest_asyncio.fixture
async def admin_headers(gateway: PersistenceGateway, tenant: Tenant) -> dict:
    issued = await AuthGate(gateway).login_tenant_admin(tenant.slug, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {issued.access_token}"}
