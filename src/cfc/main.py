"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cfc.admin.router import router as admin_router
from cfc.auth.router import router as auth_router
from cfc.config import get_settings
from cfc.database import close_store, init_store
from cfc.db.seed import seed_demo_data
from cfc.deliveries.router import router as requests_router
from cfc.gamification.router import router as gamification_router
from cfc.health.router import router as health_router
from cfc.leaderboard.router import router as leaderboard_router
from cfc.middleware import setup_middleware
from cfc.users.router import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    store = await init_store(settings)
    logger.info("Store ready (backend=%s, namespace=%s)", settings.storage_backend, settings.storage_namespace)

    if settings.seed_on_startup:
        await seed_demo_data(store)

    yield

    await close_store()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Community Food Connect API",
        description="Backend API for Community Food Connect: volunteer food delivery with gamified rewards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(requests_router)
    app.include_router(gamification_router)
    app.include_router(leaderboard_router)
    app.include_router(admin_router)

    return app


app = create_app()
