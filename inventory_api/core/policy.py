"""
Role policy shared by the API dependencies and the client route gate.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

ADMIN = "admin"
USER = "user"
DEFAULT_ROLE = USER

# Sentinel requirement: any authenticated role is enough.
AUTHENTICATED = frozenset()


def role_of(claims: Optional[Mapping[str, Any]]) -> str:
    """Role carried by a credential; tokens without one are plain users."""
    if not claims:
        return DEFAULT_ROLE
    role = claims.get("role")
    return str(role) if role else DEFAULT_ROLE


def is_allowed(role: Optional[str], required: Iterable[str]) -> bool:
    """
    True when `role` satisfies the declared requirement.

    An empty requirement only asks for an authenticated caller, which is the
    caller's job to establish before asking.
    """
    required_set = {str(r) for r in required}
    if not required_set:
        return True
    return (role or DEFAULT_ROLE) in required_set
