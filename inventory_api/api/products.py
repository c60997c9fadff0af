from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from inventory_api.core.auth import require_roles
from inventory_api.core.config import settings
from inventory_api.core.db import get_db
from inventory_api.models import Product
from inventory_api.repositories import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    create_product,
    delete_product,
    product_analytics,
    replace_product,
    search_products,
    update_quantity,
)
from inventory_api.schemas import Analytics, DeleteResult, ProductIn, ProductMessage, ProductPage, ProductRead, QuantityIn

router = APIRouter(prefix="/api/products", tags=["products"])

can_read = Depends(require_roles(settings.product_read_roles_list))
can_write = Depends(require_roles(settings.product_write_roles_list))


def _with_message(product: Product, message: str) -> ProductMessage:
    return ProductMessage(message=message, **ProductRead.model_validate(product).model_dump())


def _int_param(raw: Optional[str], default: int) -> int:
    # Absent, non-numeric and non-positive values fall back to the default.
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value >= 1 else default


@router.post(
    "",
    response_model=ProductMessage,
    status_code=status.HTTP_201_CREATED,
    dependencies=[can_write],
)
def http_create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return _with_message(create_product(db, payload), "Product created")


@router.get("", response_model=ProductPage, dependencies=[can_read])
def http_list_products(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    name: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    return search_products(
        db,
        name=name,
        page=_int_param(page, DEFAULT_PAGE),
        page_size=_int_param(limit, DEFAULT_PAGE_SIZE),
    )


@router.get("/analytics", response_model=Analytics, dependencies=[can_read])
def http_product_analytics(db: Session = Depends(get_db)):
    return product_analytics(db)


@router.put("/{product_id}", response_model=ProductMessage, dependencies=[can_write])
def http_replace_product(product_id: str, payload: ProductIn, db: Session = Depends(get_db)):
    return _with_message(replace_product(db, product_id, payload), "Product updated")


@router.put("/{product_id}/quantity", response_model=ProductMessage, dependencies=[can_write])
def http_update_quantity(product_id: str, payload: QuantityIn, db: Session = Depends(get_db)):
    return _with_message(update_quantity(db, product_id, payload), "Quantity updated")


@router.delete("/{product_id}", response_model=DeleteResult, dependencies=[can_write])
def http_delete_product(product_id: str, db: Session = Depends(get_db)):
    product = delete_product(db, product_id)
    return DeleteResult(id=product.id, message="Product deleted")
