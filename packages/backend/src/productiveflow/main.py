"""FastAPI application factory.

Learn: App factory pattern. create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown of the database handle and
the optional Redis pool. Middleware, CORS, exception handlers and
routers all register here; each concern lives in its own module.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from productiveflow import __version__
from productiveflow.api import api_router
from productiveflow.auth.guards import page_gatekeeper
from productiveflow.auth.identity import RedirectRequired
from productiveflow.auth.session import clear_session
from productiveflow.config import settings
from productiveflow.db.engine import Database
from productiveflow.logging_config import configure_logging
from productiveflow.middleware.rate_limit import RateLimitMiddleware
from productiveflow.middleware.request_id import RequestIdMiddleware
from productiveflow.middleware.security import SecurityHeadersMiddleware
from productiveflow.pages import protected_router, public_router
from productiveflow.redis_pool import close_redis, init_redis
from productiveflow.services.errors import ServiceError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` at
    shutdown. The database reference taken here is the one that keeps the
    engine alive for the app's lifetime.
    """
    logger.info(
        "productiveflow.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    database: Database = app.state.database
    await database.acquire()

    try:
        await init_redis()
        logger.info("productiveflow.redis_connected", url=settings.redis_url)
    except Exception as e:
        # Redis only backs rate limiting; run without it
        logger.warning("productiveflow.redis_unavailable", error=str(e))

    yield

    logger.info("productiveflow.shutdown")
    await close_redis()
    await database.shutdown()


# ─── Exception handlers ──────────────────────────────────


async def _redirect_required(request: Request, exc: RedirectRequired):
    response = RedirectResponse(exc.location, status_code=307)
    if exc.clear_session:
        clear_session(response)
    return response


async def _service_error(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build and return the FastAPI application.

    `database` defaults to one built from settings; tests pass their own.
    """
    configure_logging()

    app = FastAPI(
        title="ProductiveFlow",
        description="Multi-tenant project and task management",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database or Database(
        settings.database_url, echo=settings.database_echo
    )

    app.add_exception_handler(RedirectRequired, _redirect_required)
    app.add_exception_handler(ServiceError, _service_error)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(public_router, tags=["pages"])
    app.include_router(
        protected_router, tags=["pages"], dependencies=[Depends(page_gatekeeper)]
    )

    return app


# Default app instance (used by uvicorn: productiveflow.main:app)
app = create_app()
