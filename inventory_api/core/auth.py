from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from fastapi import Depends, Request
from jose.exceptions import JWTError

from inventory_api.core.logging import get_logger
from inventory_api.core.policy import is_allowed, role_of
from inventory_api.core.security import decode_access_token
from inventory_api.errors import Forbidden, InvalidCredential, Unauthenticated

logger = get_logger(__name__)


def _parse_bearer(auth_header: Optional[str]) -> Optional[str]:
    """Token part of `Authorization: Bearer <token>`; None when absent or another scheme."""
    scheme, _, token = (auth_header or "").strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def verify_credential(token: Optional[str]) -> Dict[str, Any]:
    """
    Validate a bearer credential and return its claims.

    Raises Unauthenticated when there is no token and InvalidCredential when
    the signature or expiry check fails.
    """
    if not token:
        raise Unauthenticated()
    try:
        return decode_access_token(token)
    except JWTError as e:
        # Keep response generic; the log keeps the reason.
        logger.info("Token validation failed: %s", e)
        raise InvalidCredential() from e


def require_role(claims: Dict[str, Any], roles: Iterable[str]) -> Dict[str, Any]:
    if not is_allowed(role_of(claims), roles):
        raise Forbidden("Insufficient permissions", details=f"Requires role: {', '.join(sorted(roles))}")
    return claims


async def get_current_claims(request: Request) -> Dict[str, Any]:
    """
    Dependency that validates the Authorization header and returns the claims.
    """
    claims = verify_credential(_parse_bearer(request.headers.get("Authorization")))
    request.state.claims = claims
    return claims


def require_roles(required: Iterable[str]):
    """
    Dependency factory declaring which roles may call a route.

    Example:
        @router.get("/api/products", dependencies=[Depends(require_roles(["admin"]))])
    """
    required_set = frozenset(str(r) for r in required)

    async def _dependency(claims: Dict[str, Any] = Depends(get_current_claims)) -> Dict[str, Any]:
        return require_role(claims, required_set)

    return _dependency
