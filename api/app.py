"""FastAPI application factory."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from core.config import InvoicingConfig
from core.container import build_services

logger = logging.getLogger(__name__)


def create_app(services: dict, lifespan=None) -> FastAPI:
    """App with error handlers, request IDs and data/actions routes."""
    app = FastAPI(title="Invoicing", lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    return app


def create_default_app() -> FastAPI:
    """
    App wired from the environment.

    INVOICING_STORAGE selects 'postgres' (default, URL from Vault) or
    'memory'.
    """
    config = InvoicingConfig(storage=os.getenv("INVOICING_STORAGE", "postgres"))

    postgres = None
    if config.storage == "postgres":
        from clients.postgres_client import PostgresClient
        from clients.vault_client import get_database_url

        postgres = PostgresClient(get_database_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if postgres is not None:
            postgres.close()

    logger.info(f"Creating invoicing API with {config.storage} storage")
    return create_app(build_services(config, postgres=postgres), lifespan=lifespan)
