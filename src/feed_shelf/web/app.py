# ABOUTME: FastAPI application factory with CORS and Supabase client lifespan.
# ABOUTME: Builds app-scoped services once and hangs them on app.state for the dependencies.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import acreate_client

from feed_shelf.config import Settings, get_settings
from feed_shelf.errors import ConfigurationError
from feed_shelf.services.identity import IdentityService
from feed_shelf.services.storage import FeedStore
from feed_shelf.services.tokens import TokenVerifier

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create the Supabase-backed store unless one was injected, and close it on shutdown."""
    settings: Settings = app.state.settings
    logger.info("app_startup", port=settings.port)
    owned_store = None
    if app.state.store is None:
        if not settings.supabase_url or settings.supabase_key is None:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be configured")
        client = await acreate_client(
            settings.supabase_url, settings.supabase_key.get_secret_value()
        )
        owned_store = app.state.store = FeedStore(client, settings.feeds_table)
    yield
    logger.info("app_shutdown")
    if owned_store is not None:
        await owned_store.close()


def create_app(
    settings: Settings | None = None,
    *,
    store: FeedStore | None = None,
    identity: IdentityService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="feed-shelf",
        description="OPML feed import and per-user feed storage",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.verifier = TokenVerifier.from_settings(settings)
    app.state.store = store
    app.state.identity = identity or IdentityService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from feed_shelf.web.auth import router as auth_router
    from feed_shelf.web.routes import router

    app.include_router(router)
    app.include_router(auth_router)

    return app
