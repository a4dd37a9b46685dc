"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — creates the connection pool at startup, disposes it at shutdown
  2. CORS middleware — allows browser frontends to call the API
  3. Exception handlers — maps domain errors to HTTP responses
  4. Router registration — mounts the auth and document endpoints

Running locally:
    uvicorn auth_lookup.main:app --reload --port 3000
or
    python -m auth_lookup.main
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import auth_lookup.models  # noqa: F401  (registers tables on Base.metadata)
from auth_lookup.config import settings
from auth_lookup.database import Base, check_connection, create_engine, create_session_factory
from auth_lookup.exceptions import register_exception_handlers
from auth_lookup.logging_config import setup_logging
from auth_lookup.routers import auth, documents

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Builds the engine (the process-wide connection pool), stores it and its
      session factory on app.state for get_db(), and runs a connectivity
      check. With CREATE_TABLES=true and a reachable database it also
      creates missing tables, a development convenience only; production
      schemas are managed outside this service. An unreachable database is
      logged and startup continues.

    Shutdown:
      Disposes of the engine, closing all pooled connections.
    """
    # --- Startup ---
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    connected = await check_connection(engine)

    if settings.CREATE_TABLES:
        if connected:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        else:
            logger.warning("CREATE_TABLES is set but the database is unreachable; skipping")

    logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
    yield
    # --- Shutdown ---
    await engine.dispose()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="User registration, login, and document detail lookup",
        lifespan=lifespan,
    )

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    # Registered before CORS so that CORS stays the outermost middleware
    # and 500 responses still carry CORS headers.
    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------

    # Browsers reject credentialed requests to a wildcard origin, so
    # credentials are only allowed when origins are listed explicitly.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials="*" not in settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(auth.router, tags=["Auth"])
    app.include_router(documents.router, prefix="/documents", tags=["Documents"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe. Does not touch the database."""
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("auth_lookup.main:app", host=settings.HOST, port=settings.PORT)
