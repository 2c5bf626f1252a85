"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from walklet_api.api.auth import router as auth_router
from walklet_api.api.dev import router as dev_router
from walklet_api.api.meals import router as meals_router
from walklet_api.api.users import router as users_router
from walklet_api.api.walks import router as walks_router
from walklet_api.app_logging import configure_logging
from walklet_api.containers import AppContainer
from walklet_api.domain.errors import WalkletError

SERVICE_NAME = "walklet-api"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()
        logger.info("Closed outbound clients")

    app = FastAPI(title="Walklet API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=container.settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WalkletError)
    async def walklet_error_handler(request: Request, exc: WalkletError) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc,
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=exc.headers,
        )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(walks_router)
    app.include_router(meals_router)
    if container.settings.dev_mode:
        app.include_router(dev_router)
    else:
        logger.info("Development routes disabled")

    @app.get("/")
    async def root() -> dict[str, str]:
        """Friendly landing message."""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "message": "Welcome to Walklet API. Try GET /health",
            "time": _now_iso(),
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok", "service": SERVICE_NAME, "time": _now_iso()}

    return app


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()
