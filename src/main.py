"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, inventory, recipes, websocket
from src.config import get_settings
from src.exception_handlers import setup_exception_handlers

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(
        f"Starting InvenSync API ({settings.environment}); "
        f"decay day boundaries in {settings.decay_timezone}"
    )
    yield


app = FastAPI(
    title="InvenSync API",
    description="Household inventory with expiry tracking and recipe suggestions",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:8081",
            "http://localhost:19006",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

setup_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(inventory.router)
app.include_router(recipes.router)
app.include_router(websocket.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
