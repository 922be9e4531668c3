"""
FastAPI application entry point for the prescription BFF.

Serves the GraphQL API at /graphql (GraphiQL in the browser) and forwards
every query and mutation to the Records Service over HTTP.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter
import uvicorn

from bff import __version__
from bff.config import settings
from bff.gql import get_context, schema
from bff.health import router as health_router
from bff.middleware import LoggingMiddleware
from records_svc.core.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(level="INFO", json_format=True, app_name="bff")

    logger = logging.getLogger(__name__)
    logger.info(
        "Starting prescription BFF...",
        extra={"records_svc_url": settings.records_svc_url}
    )

    yield

    logger.info("Prescription BFF shutting down...")


def create_app() -> FastAPI:
    """Build the FastAPI application with the GraphQL router and health endpoints."""
    app = FastAPI(
        title="Prescription BFF",
        description="GraphQL API over the Records Service.",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(LoggingMiddleware)

    graphql_app = GraphQLRouter(schema, context_getter=get_context)
    app.include_router(graphql_app, prefix="/graphql")
    app.include_router(health_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "bff.main:app",
        host=settings.bff_host,
        port=settings.bff_port,
        reload=settings.bff_reload
    )


if __name__ == "__main__":
    run()
