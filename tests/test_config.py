"""Configuration and database URL handling tests."""
import pytest
from pydantic import ValidationError

from snackdash.core.config import Settings
from snackdash.core.database import normalize_async_database_url


@pytest.mark.parametrize("raw, expected", [
    ("postgres://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
    ("postgresql://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
    ("postgresql+asyncpg://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
    ("postgresql+psycopg://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
    ("sqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ("sqlite+aiosqlite:///local.db", "sqlite+aiosqlite:///local.db"),
])
def test_normalize_async_database_url(raw, expected):
    assert normalize_async_database_url(raw) == expected


def test_cors_origins_from_comma_list():
    settings = Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY="k",
        CORS_ORIGINS="https://a.example, https://b.example,",
    )
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]


def test_cors_origins_accepts_list():
    settings = Settings(DATABASE_URL="sqlite://", JWT_SECRET_KEY="k", CORS_ORIGINS=["https://a.example"])
    assert settings.cors_origins_list == ["https://a.example"]


def test_required_settings(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(DATABASE_URL="sqlite://", _env_file=None)
