"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fintrack.core import get_logger
from fintrack.core.errors import LedgerError, StorageFailure
from fintrack.core.security import get_security_provider
from fintrack.middleware.auth import AuthMiddleware
from fintrack.routers import accounts_router, transactions_router

LOGGER = get_logger(__name__)


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Translate domain errors into JSON responses."""

    if isinstance(exc, StorageFailure):
        LOGGER.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {"error": exc.message, "code": exc.code},
        status_code=exc.status_code,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Fintrack Ledger", version="0.1.0")
    app.add_middleware(AuthMiddleware, security_provider=get_security_provider())
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.include_router(accounts_router)
    app.include_router(transactions_router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
