from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_api.core.auth import get_current_claims
from inventory_api.core.db import get_db
from inventory_api.core.logging import get_logger
from inventory_api.core.policy import role_of
from inventory_api.core.security import create_access_token, verify_password
from inventory_api.errors import InvalidCredentials
from inventory_api.repositories import get_user_by_username
from inventory_api.schemas import Identity, LoginIn, LoginOut, UserRead

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = get_user_by_username(db, payload.username)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("login rejected", extra={"username": payload.username})
        raise InvalidCredentials()

    token = create_access_token(user.username, user.role)
    logger.info("login accepted", extra={"username": user.username, "role": user.role})
    return LoginOut(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=Identity)
def me(claims: Dict[str, Any] = Depends(get_current_claims)):
    exp = claims.get("exp")
    return Identity(
        username=claims["sub"],
        role=role_of(claims),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
    )
