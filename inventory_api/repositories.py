"""
Product and user store.

Plain functions over a SQLAlchemy session. Each one touches a single row and
commits on its own; database errors are translated into `inventory_api.errors`
and never leak to callers.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_api.core.logging import get_logger
from inventory_api.errors import DuplicateKey, NotFound, ValidationError
from inventory_api.models import Product, User, utcnow
from inventory_api.schemas import Analytics, NameCount, ProductIn, ProductPage, ProductRead, QuantityIn

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
ANALYTICS_TOP_N = 5

_M = TypeVar("_M", bound=BaseModel)
ProductFields = Union[ProductIn, Mapping[str, Any]]


def format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _coerce(model: type[_M], data: Any, message: Optional[str] = None) -> _M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(message, details=format_errors(e)) from e


def _get_or_404(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def _duplicate_sku(sku: str) -> DuplicateKey:
    return DuplicateKey("Duplicate SKU", details=f"A product with SKU {sku!r} already exists")


def _commit(db: Session, sku: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # The only unique constraint on products is the sku.
        raise _duplicate_sku(sku) from e


# -------------------------
# Products
# -------------------------
def get_product(db: Session, product_id: str) -> Optional[Product]:
    return db.get(Product, product_id)


def get_product_by_sku(db: Session, sku: str) -> Optional[Product]:
    return db.execute(select(Product).where(Product.sku == sku)).scalars().first()


def create_product(db: Session, fields: ProductFields) -> Product:
    payload = _coerce(ProductIn, fields)
    if get_product_by_sku(db, payload.sku) is not None:
        raise _duplicate_sku(payload.sku)

    now = utcnow()
    product = Product(**payload.model_dump(), created_at=now, updated_at=now)
    db.add(product)
    _commit(db, payload.sku)
    db.refresh(product)
    logger.info("product created", extra={"productId": product.id, "sku": product.sku})
    return product


def replace_product(db: Session, product_id: str, fields: ProductFields) -> Product:
    payload = _coerce(ProductIn, fields)
    product = _get_or_404(db, product_id)

    clash = get_product_by_sku(db, payload.sku)
    if clash is not None and clash.id != product.id:
        raise _duplicate_sku(payload.sku)

    for key, value in payload.model_dump().items():
        setattr(product, key, value)
    product.updated_at = utcnow()
    _commit(db, payload.sku)
    db.refresh(product)
    logger.info("product updated", extra={"productId": product.id, "sku": product.sku})
    return product


def update_quantity(db: Session, product_id: str, quantity: Any) -> Product:
    data = quantity if isinstance(quantity, (QuantityIn, Mapping)) else {"quantity": quantity}
    payload = _coerce(QuantityIn, data, "Quantity must be a non-negative integer")
    product = _get_or_404(db, product_id)

    product.quantity = payload.quantity
    product.updated_at = utcnow()
    _commit(db, product.sku)
    db.refresh(product)
    logger.info("product quantity updated", extra={"productId": product.id, "quantity": product.quantity})
    return product


def delete_product(db: Session, product_id: str) -> Product:
    product = _get_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("product deleted", extra={"productId": product_id})
    return product


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_products(
    db: Session,
    name: Optional[str] = None,
    page: int = DEFAULT_PAGE,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ProductPage:
    """
    Case-insensitive substring search on name, newest first.

    `page` is 1-based; `pages` is ceil(total / page_size), so 0 on no match.
    """
    page = page if page and page >= 1 else DEFAULT_PAGE
    page_size = page_size if page_size and page_size >= 1 else DEFAULT_PAGE_SIZE

    conditions = []
    if name:
        conditions.append(Product.name.ilike(f"%{_escape_like(name)}%", escape="\\"))

    total = db.execute(select(func.count()).select_from(Product).where(*conditions)).scalar_one()
    rows = (
        db.execute(
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        .scalars()
        .all()
    )
    return ProductPage(
        products=[ProductRead.model_validate(p) for p in rows],
        total=total,
        page=page,
        pages=math.ceil(total / page_size),
    )


def _most_added(db: Session) -> list[NameCount]:
    count = func.count(Product.id).label("count")
    rows = db.execute(
        select(Product.name, count).group_by(Product.name).order_by(count.desc()).limit(ANALYTICS_TOP_N)
    ).all()
    return [NameCount(name=name, count=n) for name, n in rows]


def _top_expensive(db: Session) -> list[ProductRead]:
    rows = db.execute(select(Product).order_by(Product.price.desc()).limit(ANALYTICS_TOP_N)).scalars().all()
    return [ProductRead.model_validate(p) for p in rows]


def _total_value(db: Session) -> float:
    total = db.execute(select(func.coalesce(func.sum(Product.price * Product.quantity), 0))).scalar_one()
    return float(total)


def _on_own_session(bind, query):
    with Session(bind=bind) as session:
        return query(session)


def product_analytics(db: Session) -> Analytics:
    """
    Run the three aggregate queries concurrently, each on its own session
    bound to the same engine, and combine the results.
    """
    bind = db.get_bind()
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="analytics") as pool:
        most_added = pool.submit(_on_own_session, bind, _most_added)
        top_expensive = pool.submit(_on_own_session, bind, _top_expensive)
        total_value = pool.submit(_on_own_session, bind, _total_value)
        return Analytics(
            most_added=most_added.result(),
            top_expensive=top_expensive.result(),
            total_value=total_value.result(),
        )


# -------------------------
# Users
# -------------------------
def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).where(User.username == username)).scalars().first()


def create_user(db: Session, username: str, password_hash: str, role: str = "user") -> User:
    user = User(username=username, password_hash=password_hash, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateKey("Duplicate username", details=f"User {username!r} already exists") from e
    db.refresh(user)
    return user
