from __future__ import annotations

from typing import FrozenSet, Mapping, Optional

from inventory_api.client.auth_context import AuthContext
from inventory_api.core.policy import ADMIN, AUTHENTICATED, is_allowed

LOGIN = "/login"
DASHBOARD = "/"
ADMIN_PORTAL = "/admin"

# None: public; empty set: any signed-in role; otherwise the roles allowed.
ROUTES: Mapping[str, Optional[FrozenSet[str]]] = {
    LOGIN: None,
    DASHBOARD: AUTHENTICATED,
    ADMIN_PORTAL: frozenset({ADMIN}),
}


def resolve_route(path: str, auth: AuthContext) -> str:
    """Return `path` when `auth` may open it, else the login route."""
    if path not in ROUTES:
        return LOGIN
    required = ROUTES[path]
    if required is None:
        return path
    if not auth.is_authenticated or not is_allowed(auth.role, required):
        return LOGIN
    return path
