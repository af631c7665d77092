"""Map inventory domain errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.exceptions import (
    ItemNotFound,
    ItemValidationError,
    PartialDecayFailure,
    RecipeGenerationError,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)


def item_not_found_handler(request: Request, exc: ItemNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


def item_validation_handler(request: Request, exc: ItemValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    """The client shows one retryable notice; nothing is retried server-side."""
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "retryable": True},
    )


def partial_decay_handler(request: Request, exc: PartialDecayFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_207_MULTI_STATUS,
        content={
            "detail": str(exc),
            "mutated": exc.mutated,
            "failed_ids": exc.failed_ids,
            "retryable": True,
        },
    )


def recipe_generation_handler(request: Request, exc: RecipeGenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc), "retryable": True},
    )


def setup_exception_handlers(app: FastAPI) -> FastAPI:
    """Register the domain error handlers on the application."""
    app.add_exception_handler(ItemNotFound, item_not_found_handler)
    app.add_exception_handler(ItemValidationError, item_validation_handler)
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.add_exception_handler(PartialDecayFailure, partial_decay_handler)
    app.add_exception_handler(RecipeGenerationError, recipe_generation_handler)
    return app
