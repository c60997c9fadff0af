import os
import tempfile
from pathlib import Path

import pytest

# Environment defaults must be in place before the app (and its cached Settings) is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="inventory-api-tests-"))
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR / 'inventory_test.db'}")

from fastapi.testclient import TestClient  # noqa: E402

from inventory_api import models  # noqa: E402,F401
from inventory_api.core.db import Base, get_engine, get_sessionmaker  # noqa: E402
from inventory_api.core.security import create_access_token, get_password_hash  # noqa: E402
from inventory_api.main import app  # noqa: E402
from inventory_api.repositories import create_user  # noqa: E402

ADMIN_PASSWORD = "admin-pass"
USER_PASSWORD = "user-pass"


@pytest.fixture(autouse=True)
def _schema():
    engine = get_engine()
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def users(db):
    admin = create_user(db, "admin", get_password_hash(ADMIN_PASSWORD), role="admin")
    user = create_user(db, "clerk", get_password_hash(USER_PASSWORD), role="user")
    return {"admin": admin, "user": user}


@pytest.fixture
def admin_token() -> str:
    return create_access_token("admin", "admin")


@pytest.fixture
def user_token() -> str:
    return create_access_token("clerk", "user")


@pytest.fixture
def admin_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token: str) -> dict:
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def product_payload():
    def _make(**overrides):
        data = {
            "name": "Widget",
            "type": "hardware",
            "sku": "SKU-100",
            "image_url": "https://example.com/widget.png",
            "description": "A small widget",
            "quantity": 10,
            "price": 2.5,
        }
        data.update(overrides)
        return data

    return _make
