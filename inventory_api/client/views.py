"""
Client-side views of the inventory app.

Each view owns its data and a small request state machine:
idle -> loading -> (success | error), back to idle with `dismiss()`.
Error messages are the server's, shown verbatim.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, List, Optional

from inventory_api.client.api import ClientError, InventoryClient
from inventory_api.client.routes import DASHBOARD
from inventory_api.core.logging import get_logger

logger = get_logger(__name__)

FORM_FIELDS = ("name", "type", "sku", "image_url", "description", "price", "quantity")


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class BaseView:
    fallback_error = "Request failed"

    def __init__(self, client: InventoryClient) -> None:
        self.client = client
        self.state = ViewState.IDLE
        self.error = ""

    @property
    def loading(self) -> bool:
        return self.state is ViewState.LOADING

    def dismiss(self) -> None:
        self.state = ViewState.IDLE
        self.error = ""

    @contextmanager
    def _request(self, fallback: Optional[str] = None):
        self.state = ViewState.LOADING
        self.error = ""
        try:
            yield
        except ClientError as e:
            logger.debug("view request failed", extra={"view": type(self).__name__, "status": e.status_code})
            # Transport failures have no server message to show.
            server_message = e.message if e.status_code else ""
            self.error = server_message or fallback or self.fallback_error
            self.state = ViewState.ERROR
        else:
            self.state = ViewState.SUCCESS


class LoginView(BaseView):
    def submit(self, username: str, password: str) -> Optional[str]:
        """Sign in; returns the route to go to next, or None on failure."""
        with self._request():
            self.client.login(username, password)
        if self.state is ViewState.ERROR:
            self.error = "Invalid credentials"
            return None
        return DASHBOARD

    def logout(self) -> None:
        self.client.logout()
        self.dismiss()


class DashboardView(BaseView):
    """Read-only product table plus analytics, fetched on mount."""

    fallback_error = "Failed to load data"
    page_size = 10

    def __init__(self, client: InventoryClient) -> None:
        super().__init__(client)
        self.products: List[Dict[str, Any]] = []
        self.total = 0
        self.page = 1
        self.pages = 1
        self.search = ""
        self.analytics: Dict[str, Any] = {"mostAdded": [], "topExpensive": [], "totalValue": 0}

    def fetch(self) -> None:
        with self._request(), ThreadPoolExecutor(max_workers=2, thread_name_prefix="dashboard") as pool:
            pending_listing = pool.submit(self.client.list_products, page=self.page, limit=self.page_size, name=self.search)
            pending_analytics = pool.submit(self.client.analytics)
            listing = pending_listing.result()
            analytics = pending_analytics.result()
            self.products = listing["products"]
            self.total = listing["total"]
            self.pages = listing["pages"]
            self.analytics = analytics

    mount = fetch


class AdminPortalView(DashboardView):
    """Dashboard plus create/edit form, inline quantity editor, delete and paging."""

    page_size = 5

    def __init__(self, client: InventoryClient) -> None:
        super().__init__(client)
        self.form: Dict[str, Any] = self._blank_form()
        self.editing_id: Optional[str] = None

    @staticmethod
    def _blank_form() -> Dict[str, Any]:
        return {key: "" for key in FORM_FIELDS}

    @property
    def mode(self) -> str:
        return "update" if self.editing_id else "create"

    def set_field(self, key: str, value: Any) -> None:
        if key not in FORM_FIELDS:
            raise KeyError(key)
        self.form[key] = value

    def set_search(self, text: str) -> None:
        self.search = text
        self.page = 1
        self.fetch()

    def set_page(self, page: int) -> None:
        self.page = max(1, page)
        self.fetch()

    def edit(self, product: Dict[str, Any]) -> None:
        self.form = {
            "name": product["name"],
            "type": product["type"],
            "sku": product["sku"],
            "image_url": product.get("image_url") or "",
            "description": product.get("description") or "",
            "price": str(product["price"]),
            "quantity": str(product["quantity"]),
        }
        self.editing_id = product["id"]

    def cancel_edit(self) -> None:
        self.form = self._blank_form()
        self.editing_id = None

    def submit(self) -> Optional[Dict[str, Any]]:
        saved: Optional[Dict[str, Any]] = None
        with self._request("Failed to save product"):
            if self.editing_id:
                saved = self.client.update_product(self.editing_id, dict(self.form))
            else:
                saved = self.client.create_product(dict(self.form))
        if self.state is ViewState.SUCCESS:
            self.cancel_edit()
            self.fetch()
        return saved

    def commit_quantity(self, product_id: str, value: Any) -> None:
        """Inline quantity editor: called when the field loses focus."""
        with self._request("Failed to update quantity"):
            updated = self.client.update_quantity(product_id, value)
            self.products = [updated if p["id"] == product_id else p for p in self.products]

    def delete(self, product_id: str) -> None:
        with self._request("Failed to delete product"):
            self.client.delete_product(product_id)
            self.products = [p for p in self.products if p["id"] != product_id]
        if self.state is ViewState.SUCCESS:
            self.fetch()
