"""Database engine, declarative base and session management."""
from typing import AsyncGenerator, Optional

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from snackdash.core.config import settings


# Legacy or driverless URL prefixes mapped onto the installed async drivers
_DRIVER_PREFIXES = (
    ("postgresql+asyncpg://", "postgresql+psycopg://"),
    ("postgres://", "postgresql+psycopg://"),
    ("postgresql://", "postgresql+psycopg://"),
    ("sqlite://", "sqlite+aiosqlite://"),
)


def normalize_async_database_url(database_url: str) -> str:
    """Point any accepted URL form at psycopg 3 or aiosqlite."""
    for prefix, replacement in _DRIVER_PREFIXES:
        if database_url.startswith(prefix):
            return replacement + database_url[len(prefix):]
    return database_url


naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    metadata = MetaData(naming_convention=naming_convention)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    url = normalize_async_database_url(database_url)

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite must share one connection across sessions
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        return create_async_engine(url, echo=echo, **kwargs)

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_recycle=1800,
        # Waiting for a pooled connection counts against the gateway budget
        pool_timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        connect_args={"connect_timeout": max(int(settings.GATEWAY_TIMEOUT_SECONDS), 1)},
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


async def create_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create missing tables. Local development and tests only; deployments use alembic."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: Optional[AsyncEngine] = None) -> None:
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session_maker() as session:
        yield session
