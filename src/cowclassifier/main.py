"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cowclassifier import __version__
from cowclassifier.api.routes import router
from cowclassifier.classification.errors import EmptyBatchError, SessionBusyError
from cowclassifier.classification.predictor import HttpPredictor
from cowclassifier.classification.registry import SessionRegistry
from cowclassifier.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting CowClassifier (predictor=%s, timeout=%ss, max_images=%s)",
        settings.predictor_url,
        settings.predictor_timeout,
        settings.max_images,
    )

    predictor = HttpPredictor(settings.predictor_url, timeout=settings.predictor_timeout)
    app.state.predictor = predictor
    app.state.registry = SessionRegistry(max_items=settings.max_images)

    logger.info("CowClassifier ready")
    yield

    logger.info("Shutting down CowClassifier")
    await predictor.aclose()
    logger.info("CowClassifier shutdown complete")


async def _empty_batch_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


async def _session_busy_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc)},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="CowClassifier",
        description="Batch cow body-conformation classification against a remote predictor",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(EmptyBatchError, _empty_batch_handler)
    application.add_exception_handler(SessionBusyError, _session_busy_handler)
    application.include_router(router)
    return application


app = create_app()
