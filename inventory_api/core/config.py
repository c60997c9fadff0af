from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _csv(raw: str) -> list[str]:
    return [x.strip() for x in raw.split(",") if x.strip()]


class Settings(BaseSettings):
    """
    Configuration for inventory-api.

    Everything is read from the environment (or a local .env file). The JWT
    secret has a development default only; deployments must override it.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Service ---
    app_name: str = Field(default="inventory-api", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=5000, validation_alias="PORT")

    # CSV allowlist, e.g. "http://localhost:5173,http://127.0.0.1:5173"
    cors_allowed_origins: str = Field(default="http://localhost:5173", validation_alias="CORS_ALLOWED_ORIGINS")

    @property
    def cors_origins_list(self) -> list[str]:
        return _csv(self.cors_allowed_origins)

    # --- Credentials (JWT - JSON Web Token) ---
    jwt_secret: str = Field(default="change-me", validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # --- Access policy: roles allowed per product endpoint group ---
    product_read_roles: str = Field(default="admin", validation_alias="PRODUCT_READ_ROLES")
    product_write_roles: str = Field(default="admin", validation_alias="PRODUCT_WRITE_ROLES")

    @property
    def product_read_roles_list(self) -> list[str]:
        return _csv(self.product_read_roles)

    @property
    def product_write_roles_list(self) -> list[str]:
        return _csv(self.product_write_roles)

    # -------------------------
    # Database
    # -------------------------
    # Option A: full URL (used as-is when defined).
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Option B: pieces
    db_dialect: str = Field(default="postgresql+psycopg", validation_alias="DB_DIALECT")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="inventory_db", validation_alias="DB_NAME")
    db_user: str = Field(default="inventory_app", validation_alias="DB_USER")
    db_password: Optional[str] = Field(default=None, validation_alias="DB_PASSWORD")

    @property
    def database_url_resolved(self) -> str:
        """
        Return DATABASE_URL when set, otherwise build it from the DB_* pieces.
        """
        if self.database_url and self.database_url.strip():
            return self.database_url.strip()

        pwd = self.db_password or ""
        return f"{self.db_dialect}://{self.db_user}:{pwd}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
