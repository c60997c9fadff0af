from inventory_api.client.api import ClientError, InventoryClient
from inventory_api.client.auth_context import AuthContext
from inventory_api.client.routes import resolve_route
from inventory_api.client.views import AdminPortalView, DashboardView, LoginView, ViewState

__all__ = [
    "AdminPortalView",
    "AuthContext",
    "ClientError",
    "DashboardView",
    "InventoryClient",
    "LoginView",
    "ViewState",
    "resolve_route",
]
