from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from inventory_api.client.auth_context import AuthContext


class ClientError(Exception):
    """
    Failed call. For non-2xx responses `message` is the server's `error`
    field verbatim; transport failures carry `status_code` 0.
    """

    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


class InventoryClient:
    """
    Thin wrapper over the inventory HTTP API.

    Any `httpx.Client` can be supplied (FastAPI's TestClient included);
    otherwise one is created for `base_url`. Every call carries the
    credential currently held by `auth`.
    """

    def __init__(
        self,
        auth: AuthContext,
        base_url: str = "http://localhost:5000",
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.auth = auth
        self.http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {**self.auth.headers(), **kwargs.pop("headers", {})}
        try:
            r = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            # No response at all: connection refused, timeout, DNS failure.
            raise ClientError(0, str(e) or type(e).__name__) from e
        if r.is_success:
            return r.json()

        try:
            body = r.json()
        except ValueError:
            body = {}
        message = body.get("error") if isinstance(body, dict) else None
        raise ClientError(r.status_code, message or r.reason_phrase, body.get("details") if isinstance(body, dict) else None)

    # Auth
    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        user = data.get("user") or {}
        self.auth.login(data["token"], user.get("role"), user.get("username", username))
        return data

    def logout(self) -> None:
        self.auth.clear()

    # Products
    def list_products(self, page: int = 1, limit: int = 10, name: str = "") -> Dict[str, Any]:
        return self._request("GET", "/api/products", params={"page": page, "limit": limit, "name": name})

    def analytics(self) -> Dict[str, Any]:
        return self._request("GET", "/api/products/analytics")

    def create_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/products", json=fields)

    def update_product(self, product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/products/{product_id}", json=fields)

    def update_quantity(self, product_id: str, quantity: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/api/products/{product_id}/quantity", json={"quantity": quantity})

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/products/{product_id}")
