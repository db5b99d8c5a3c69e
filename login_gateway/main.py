"""Main FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from login_gateway.config import settings
from login_gateway.core.http_client import http_client_manager
from login_gateway.core.surface_manager import surface_manager
from login_gateway.middleware.session import SESSION_HEADER, SessionMiddleware
import logging

from login_gateway.api.auth import router as auth_router
from login_gateway.api.session import router as session_router

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manages application startup and shutdown events."""
    # Startup
    logger.info("Starting Login Gateway")
    await http_client_manager.start()
    logger.info("HTTP client started")

    await surface_manager.start()
    logger.info("Surface manager started")

    yield

    # Shutdown
    logger.info("Shutting down Login Gateway")

    # Tear surfaces down before closing the client they use
    await surface_manager.stop()
    logger.info("Surface manager stopped")

    if http_client_manager.is_running:
        await http_client_manager.stop()
        logger.info("HTTP client stopped")


app = FastAPI(
    title="Login Gateway",
    description="Login surface bootstrap and credential submission",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[SESSION_HEADER],
)

app.include_router(auth_router)
app.include_router(session_router)


@app.get("/")
async def root():
    """Provides basic information about the running gateway."""
    return {
        "message": "Login Gateway",
        "status": "running",
        "landing_path": settings.landing_path,
    }


@app.get("/health")
async def health_check():
    """Performs a health check of the gateway and its shared resources."""
    return {
        "status": "healthy",
        "http_client_running": http_client_manager.is_running,
        "active_surfaces": surface_manager.active_surfaces,
    }


@app.get("/surfaces")
async def get_surfaces():
    """(Admin) Gets information about all login surfaces."""
    return surface_manager.get_surface_info()
