"""Security utilities for JWT and secret hashing."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel
import uuid

from snackdash.core.config import settings
from snackdash.core.enums import AuthScope
from snackdash.core.logging import get_logger


logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class TokenPayload(BaseModel):
    """Decoded credential. ``tenant_id`` is only set for tenant-admin scope."""
    sub: str
    scope: AuthScope
    tenant_id: Optional[str] = None
    cv: Optional[int] = None  # tenant credentials_version at issue time
    exp: datetime
    iat: datetime
    jti: Optional[str] = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain secret against a stored hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Malformed stored hash
        logger.error("Stored secret hash could not be parsed")
        return False


def dummy_verify() -> None:
    """Spend the same effort as a real verify when there is nothing to compare."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Hash a plain secret."""
    return pwd_context.hash(password)


def create_access_token(
    scope: AuthScope,
    tenant_id: Optional[str] = None,
    credentials_version: Optional[int] = None,
    expires_minutes: Optional[int] = None,
) -> tuple[str, datetime]:
    """Create a signed token for one scope. Returns the token and its expiry."""
    now = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = (
            settings.MASTER_TOKEN_EXPIRE_MINUTES
            if scope == AuthScope.MASTER
            else settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    expire = now + timedelta(minutes=expires_minutes)

    payload = {
        "sub": tenant_id if scope == AuthScope.TENANT_ADMIN else "platform",
        "scope": scope.value,
        "tenant_id": tenant_id,
        "cv": credentials_version,
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }

    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def decode_token(token: str) -> Optional[TokenPayload]:
    """Decode and validate a token. Returns None when invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return TokenPayload(**payload)
    except (JWTError, ValueError) as e:
        logger.info(f"Token rejected: {type(e).__name__}")
        return None
