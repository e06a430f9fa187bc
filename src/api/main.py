"""
Application assembly.

Builds the FastAPI app, wires the credential store and password hasher
into app.state during lifespan, and mounts the auth router under /api.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.hashing.scrypt import ScryptPasswordHasher
from src.adapters.repository.json_file import JsonFileCredentialStore
from src.adapters.repository.postgres import PostgresCredentialStore, run_migrations
from src.api.errors import install_error_handlers
from src.api.routes import router
from src.config.logging_config import configure_logging
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "auth",
        "description": "Credential registration and sign-in for the map application",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Create shared adapters on startup and release them on shutdown.

    - Builds the credential store for the configured backend
    - For postgres: creates the connection pool and runs migrations
    - Creates the password hasher and shuts its worker pool down on exit
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting mapkeeper-credentials (backend=%s)", settings.credential_backend)

    pool: ConnectionPool | None = None
    if settings.credential_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.credential_store = PostgresCredentialStore(pool)
    else:
        logger.info("Using credential file %s", settings.credentials_file)
        app.state.credential_store = JsonFileCredentialStore(settings.credentials_file)

    hasher = ScryptPasswordHasher(
        n=settings.scrypt_n,
        r=settings.scrypt_r,
        p=settings.scrypt_p,
        timeout_seconds=settings.kdf_timeout_seconds,
    )
    app.state.password_hasher = hasher

    logger.info("Startup complete")

    yield

    logger.info("Shutting down")
    hasher.close()
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="mapkeeper-credentials",
    description="Credential registration and sign-in API for the mapkeeper map application",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_error_handlers(app)

app.include_router(router, prefix="/api")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with store validation.

    Returns 200 OK if the credential store can be read.
    Store failures fall through to the generic 500 handler.
    """
    request.app.state.credential_store.load_all()
    return {"status": "healthy"}
