from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
import secrets
import hashlib

from vocabdash.clock import utcnow
from vocabdash.config import get_settings

settings = get_settings()


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token whose subject is the user id."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": user_id,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token() -> tuple[str, str, datetime]:
    """
    Create an opaque refresh token.

    Returns:
        tuple: (raw_token, token_hash, expires_at); only the hash is stored.
    """
    raw_token = secrets.token_urlsafe(32)
    expires_at = utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return raw_token, hash_refresh_token(raw_token), expires_at


def hash_refresh_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode()).hexdigest()


def verify_token(token: str) -> Optional[dict]:
    """
    Decode an access token.

    Returns:
        the claims if the token is a valid, unexpired access token, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "access" or not payload.get("sub"):
        return None
    return payload
