"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from app.api.errors import register_error_handlers
from app.api.rate_limit import RateLimiterMiddleware
from app.api.v1 import health
from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.logging import configure_logging


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """
    Build the application. The settings, engine and session factory created
    here are the only process-wide handles; request code reaches them through
    app.state (see app.api.deps).
    """
    settings = settings or get_settings()
    configure_logging(settings)
    engine = engine or create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        engine.dispose()

    app = FastAPI(
        title="Tasklane API",
        lifespan=lifespan,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
    )
    # Added last so it is the outermost middleware: rate limiting runs before routing and auth.
    app.add_middleware(RateLimiterMiddleware, settings=settings)

    register_error_handlers(app)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    return app


app = create_app()
