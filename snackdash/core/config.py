"""Application configuration."""
from functools import lru_cache
from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "SnackDash Ordering API"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # Persistence gateway
    GATEWAY_TIMEOUT_SECONDS: float = 10.0
    GATEWAY_READ_RETRIES: int = 1
    GATEWAY_RETRY_BACKOFF_SECONDS: float = 0.2

    # Platform master secret (REQUIRED: one of the two)
    MASTER_SECRET: Optional[str] = None
    MASTER_SECRET_HASH: Optional[str] = None
    BCRYPT_ROUNDS: int = 12

    # JWT (REQUIRED)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    MASTER_TOKEN_EXPIRE_MINUTES: int = 15

    # Tenants
    TRIAL_DAYS: int = 7
    PUBLIC_BASE_URL: str = "http://localhost:10000"

    # Order hand-off webhook (optional)
    NOTIFY_WEBHOOK_URL: Optional[str] = None
    NOTIFY_API_KEY: Optional[str] = None
    NOTIFY_TIMEOUT_SECONDS: float = 15.0

    # CORS
    # Comma separated
    CORS_ORIGINS: str = "*"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors(cls, v):
        if isinstance(v, (list, tuple)):
            return ",".join(v)
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"      # Local only
        case_sensitive = True
        extra = "ignore"      # Ignore unrelated env vars


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
