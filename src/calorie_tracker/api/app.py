"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.foods import router as foods_router
from calorie_tracker.api.locales import router as locales_router
from calorie_tracker.api.meals import router as meals_router
from calorie_tracker.api.nutrition import router as nutrition_router
from calorie_tracker.api.profile import router as profile_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.errors import (
    NotFoundError,
    TransactionFailure,
    ValidationFailure,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.initialize()
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Calorie Tracker", lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(nutrition_router)
    app.include_router(foods_router)
    app.include_router(locales_router)
    app.include_router(profile_router)

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationFailure)
    async def invalid(_request: Request, exc: ValidationFailure) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(TransactionFailure)
    async def store_failed(_request: Request, exc: TransactionFailure) -> JSONResponse:
        logger.warning("Request aborted by store failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage temporarily unavailable"},
        )

    @app.exception_handler(httpx.HTTPError)
    async def upstream_failed(_request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.warning("FoodData Central request failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Food database unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
