from __future__ import annotations


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200

    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "inventory-api"
    assert data["version"] == "0.1.0"
    assert data["env"] == "test"


def test_responses_carry_request_id(client):
    r = client.get("/health", headers={"X-Request-Id": "req-123"})
    assert r.headers["X-Request-Id"] == "req-123"

    r = client.get("/health")
    assert r.headers["X-Request-Id"]


def test_openapi_exposes_product_routes(client):
    r = client.get("/openapi.json")
    assert r.status_code == 200, r.text
    paths = r.json().get("paths", {})
    assert "/api/products" in paths, f"available paths: {sorted(paths)}"
    assert "/api/products/analytics" in paths
    assert "/api/auth/login" in paths
