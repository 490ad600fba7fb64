"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import include_api_routes
from src.bot.application import build_bot_application
from src.config import settings
from src.services.storefront import create_storefront

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the catalog and start the Telegram application.

    A catalog that cannot be loaded aborts startup.
    """

    storefront = create_storefront()
    storefront.catalog.load()
    app.state.storefront = storefront

    bot_application = None
    if settings.bot_enabled:
        bot_application = build_bot_application(storefront)
        await bot_application.initialize()
        await bot_application.start()
        logger.info("Telegram bot ready, waiting for webhook updates")
    else:
        logger.warning("TELEGRAM_BOT_TOKEN not set, webhook endpoints are disabled")
    app.state.bot_application = bot_application

    try:
        yield
    finally:
        if bot_application is not None:
            await bot_application.stop()
            await bot_application.shutdown()
        storefront.close()
        logger.info("Storefront shut down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Telegram Storefront Bot",
        description="Catalog browsing, cart and checkout over a Telegram webhook",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
