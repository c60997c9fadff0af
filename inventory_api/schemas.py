from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _reject_bool(v: Any) -> Any:
    # JSON true/false would otherwise coerce to 1/0.
    if isinstance(v, bool):
        raise ValueError("must be a number, not a boolean")
    return v


class ProductIn(BaseModel):
    """Body of create / full-update. Numeric strings are coerced ("5", "9.99")."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    type: str = Field(min_length=1, max_length=255)
    sku: str = Field(min_length=1, max_length=64)
    image_url: str = ""
    description: str = ""
    quantity: int = Field(ge=0)
    price: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("image_url", "description", mode="before")
    @classmethod
    def _empty_when_missing(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def _no_booleans(cls, v: Any) -> Any:
        return _reject_bool(v)


class QuantityIn(BaseModel):
    quantity: int = Field(ge=0)

    @field_validator("quantity", mode="before")
    @classmethod
    def _no_booleans(cls, v: Any) -> Any:
        return _reject_bool(v)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    type: str
    sku: str
    image_url: str = ""
    description: str = ""
    quantity: int
    price: float
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt")
    updated_at: datetime = Field(validation_alias=AliasChoices("updated_at", "updatedAt"), serialization_alias="updatedAt")


class ProductMessage(ProductRead):
    message: str


class ProductPage(BaseModel):
    products: list[ProductRead]
    total: int
    page: int
    pages: int


class NameCount(BaseModel):
    name: str
    count: int


class Analytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    most_added: list[NameCount] = Field(
        default_factory=list, validation_alias=AliasChoices("most_added", "mostAdded"), serialization_alias="mostAdded"
    )
    top_expensive: list[ProductRead] = Field(
        default_factory=list, validation_alias=AliasChoices("top_expensive", "topExpensive"), serialization_alias="topExpensive"
    )
    total_value: float = Field(
        default=0.0, validation_alias=AliasChoices("total_value", "totalValue"), serialization_alias="totalValue"
    )


class DeleteResult(BaseModel):
    id: str
    message: str


class LoginIn(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class LoginOut(BaseModel):
    token: str
    user: UserRead


class Identity(BaseModel):
    username: str
    role: str
    expires_at: Optional[datetime] = None
