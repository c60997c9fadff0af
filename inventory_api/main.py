from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory_api.api import router as api_router
from inventory_api.core.config import settings
from inventory_api.core.logging import configure_logging, get_logger
from inventory_api.errors import ApiError, ServerError, ValidationError
from inventory_api.middlewares.request_id import RequestIdMiddleware
from inventory_api.repositories import format_errors

configure_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,  # Bearer tokens, no cookies
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-Id"],
    expose_headers=["X-Request-Id"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    err = ValidationError(details=format_errors(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Unhandled errors never expose internals; the log keeps the traceback.
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"requestId": request_id})
    return JSONResponse(status_code=500, content=ServerError().to_dict())


@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "version": settings.app_version,
    }


app.include_router(api_router)

logger.info(
    "inventory-api started",
    extra={
        "env": settings.environment,
        "corsOrigins": settings.cors_origins_list,
        "productReadRoles": settings.product_read_roles_list,
        "productWriteRoles": settings.product_write_roles_list,
    },
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("inventory_api.main:app", host=settings.host, port=settings.port)
