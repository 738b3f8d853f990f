"""
Message Board API Server
Core functionality: CRUD over message documents
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from database.connection import init_database, close_database
from api.routes import health, messages
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await init_database()
    yield
    await close_database()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI application

    Args:
        use_lifespan: open and close the database pool with the app; tests that
            install their own document store pass False
    """
    app = FastAPI(
        title="Message Board Backend",
        description="Backend API for messages authored by users",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Setup centralized error handling
    setup_error_handling(app)

    # Include API routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(messages.router, prefix="/messages", tags=["Messages"])

    return app


# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
app = create_app()
