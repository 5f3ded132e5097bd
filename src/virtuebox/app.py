"""Main FastAPI application module.

This module builds the FastAPI application: shared store handle, CORS,
route gate, error handlers and route registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from virtuebox import __version__, config
from virtuebox.api.routes import auth, pages, partners
from virtuebox.core.database import Database
from virtuebox.core.exceptions import VirtueBoxError
from virtuebox.core.logging_config import setup_logging
from virtuebox.core.route_gate import RouteGateMiddleware

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"success": false, "message": ...}."""

    @app.exception_handler(VirtueBoxError)
    async def handle_domain_error(request: Request, exc: VirtueBoxError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "[%s %s] %s: %s",
                request.method,
                request.url.path,
                type(exc).__name__,
                exc,
            )
            return _error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
        return _error_response(exc.status_code, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(400, _format_validation_errors(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[%s %s] Unhandled error", request.method, request.url.path)
        return _error_response(500, INTERNAL_ERROR_MESSAGE)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application.

    Args:
        database: Store handle to use. Defaults to one built from
            DATABASE_URL; startup fails if it is not set.

    Returns:
        The configured FastAPI application.
    """
    if database is None:
        database = Database(config.require_database_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(
        title="VirtueBox Partner API",
        description="Back office for partner financial profiles.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(RouteGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(partners.router)
    app.include_router(pages.router)

    @app.get("/api/health", summary="Health check", tags=["Health"])
    def health() -> dict:
        """Health check endpoint.

        Returns:
            Dictionary with status "ok".
        """
        return {"status": "ok"}

    return app


# Setup logging
setup_logging()

# Module-level application for ASGI servers (uvicorn virtuebox.app:app)
app = create_app()


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{config.API_HOST}:{config.API_PORT}"
    logger.info("Starting VirtueBox API at %s (docs: %s/docs)", server_url, server_url)
    uvicorn.run("virtuebox.app:app", host=config.API_HOST, port=config.API_PORT)
