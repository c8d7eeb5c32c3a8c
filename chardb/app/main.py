"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI

from chardb.app.exception_handlers import register_exception_handlers
from chardb.app.middleware import RequestIDMiddleware
from chardb.infra.database import close_database
from chardb.infra.logging import setup_logging, shutdown

if TYPE_CHECKING:
    from chardb.features.graphql import Schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup; release the engine and log queue on shutdown."""
    setup_logging()
    logger.info("Application starting", extra={"title": app.title})
    try:
        yield
    finally:
        await close_database()
        logger.info("Application stopped")
        shutdown()


def create_app(schema: Schema | None = None, *, graphql_path: str = "/graphql") -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        schema: GraphQL schema to mount, if any.
        graphql_path: Mount point of the GraphQL endpoint.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(title="chardb", lifespan=lifespan)

    # Exception handlers first, so middleware errors are rendered too
    register_exception_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    if schema is not None:
        from chardb.features.graphql.router import create_graphql_router

        app.include_router(create_graphql_router(schema), prefix=graphql_path)

    return app
