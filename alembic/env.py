"""Alembic migration environment."""

from logging.config import fileConfig
import re
import sys

from sqlalchemy import engine_from_config, pool
from alembic import context

from snackdash.core.database import Base, normalize_async_database_url
from snackdash.models import Tenant, Product, Order  # noqa: F401  register tables
from snackdash.core.config import settings

config = context.config

database_url = settings.DATABASE_URL
if not database_url:
    print("CRITICAL: DATABASE_URL is EMPTY in settings!")
    sys.exit(255)

# Redact password for security
redacted_url = re.sub(r':([^/@]+)@', ':****@', database_url)
print(f"Using database URL (redacted): {redacted_url}")

# psycopg 3 serves sync connections too; aiosqlite does not
sync_database_url = normalize_async_database_url(database_url).replace(
    "sqlite+aiosqlite://", "sqlite://", 1
)

config.set_main_option("sqlalchemy.url", sync_database_url.replace("%", "%%"))

# Logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
