"""Telegram application wiring for webhook delivery."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import Application, ApplicationBuilder

from src.bot.handlers import register_handlers
from src.bot.handlers.common import STOREFRONT_KEY
from src.config import settings
from src.services.storefront import Storefront

logger = logging.getLogger(__name__)


def build_bot_application(
    storefront: Storefront,
    token: str | None = None,
) -> Application:
    """Build an application without an updater; updates arrive via the webhook route."""

    token = token or settings.TELEGRAM_BOT_TOKEN
    if not token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured")

    application = ApplicationBuilder().token(token).updater(None).build()
    application.bot_data[STOREFRONT_KEY] = storefront
    register_handlers(application)
    logger.info("Telegram application built")
    return application


async def process_webhook_update(application: Application, payload: dict) -> None:
    """Decode one webhook payload and run it through the registered handlers."""

    update = Update.de_json(payload, application.bot)
    if update is None:
        logger.warning("Ignoring empty webhook payload")
        return
    logger.debug("Processing update %s", update.update_id)
    await application.process_update(update)
