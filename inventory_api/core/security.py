from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import JWTError
from passlib.context import CryptContext

from inventory_api.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or corrupted hash: treat as a failed login.
        return False


def create_access_token(
    subject: str,
    role: str,
    *,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Sign a credential carrying the subject and its role.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=settings.access_token_expire_minutes))
    claims: Dict[str, Any] = dict(extra_claims or {})
    claims.update({"sub": subject, "role": role, "iat": now, "exp": expire})
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, returning the claims.

    Raises jose.exceptions.JWTError (ExpiredSignatureError included) on failure.
    """
    token = (token or "").strip()
    if not token:
        raise JWTError("Empty token")

    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    if not isinstance(claims, dict) or not claims.get("sub"):
        raise JWTError("Token has no subject")
    return claims
