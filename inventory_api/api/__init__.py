from fastapi import APIRouter

from inventory_api.api.auth import router as auth_router
from inventory_api.api.products import router as products_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(products_router)
