"""
Main FastAPI application.

This file wires together all layers:
- Domain: Book entity and repository errors
- Repositories: MongoDB (or in-memory) storage adapter
- Routers: HTTP endpoints

The repository is created once per application and shared by all
requests through ``app.state``.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from bson import ObjectId
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pymongo import AsyncMongoClient

from . import __version__
from .config import Settings, get_settings
from .domain.entities import Book
from .logging_config import configure_logging
from .metrics import PrometheusMiddleware, metrics_endpoint
from .repositories.memory_repository import InMemoryBookRepository
from .repositories.mongo_repository import MongoBookRepository
from .repositories.repository import IRepository
from .routers import book_router, health_router

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[IRepository[Book, ObjectId]] = None,
) -> FastAPI:
    """
    Create and configure the book service application.

    Args:
        settings: Service settings (default: loaded from environment)
        repository: Repository to serve from. When omitted, one is built at
            startup according to ``settings.STORAGE_BACKEND``.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Book Service", version=__version__)

        mongo_client: Optional[AsyncMongoClient] = None
        book_repository = repository

        if book_repository is None:
            if settings.STORAGE_BACKEND == "memory":
                book_repository = InMemoryBookRepository()
                logger.warning("Using in-memory storage, data will not persist")
            else:
                mongo_client = AsyncMongoClient(settings.MONGO_URI)
                book_repository = MongoBookRepository.from_db(
                    mongo_client[settings.MONGO_DBN], settings.BOOKS_COLLECTION
                )
                logger.info(
                    "MongoDB repository configured",
                    database=settings.MONGO_DBN,
                    collection=settings.BOOKS_COLLECTION,
                )

        app.state.mongo_client = mongo_client
        app.state.book_repository = book_repository
        logger.info("Book Service started")

        yield

        logger.info("Shutting down Book Service")
        if mongo_client is not None:
            await mongo_client.close()
            logger.info("MongoDB connection closed")
        app.state.book_repository = None
        logger.info("Book Service stopped")

    app = FastAPI(
        title="Book Service",
        description="CRUD service for books stored in MongoDB",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    app.add_middleware(PrometheusMiddleware)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID for distributed tracing."""
        request_id = request.headers.get("X-Request-ID", f"req-{id(request)}")
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return Response(status_code=500)

    app.include_router(book_router.router)
    app.include_router(health_router.router)
    app.add_api_route("/metrics", metrics_endpoint, include_in_schema=False)

    return app


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
