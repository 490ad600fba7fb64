"""Point the bot's Telegram webhook at this service's ``/webhook`` route."""

from __future__ import annotations

import asyncio
import logging
import sys

from telegram import Bot
from telegram.error import TelegramError

from src.config import settings

logger = logging.getLogger(__name__)


def webhook_endpoint(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/webhook"


async def set_webhook(token: str, base_url: str) -> bool:
    endpoint = webhook_endpoint(base_url)
    async with Bot(token) as bot:
        logger.info("Setting webhook to %s", endpoint)
        ok = await bot.set_webhook(
            url=endpoint,
            max_connections=settings.WEBHOOK_MAX_CONNECTIONS,
            allowed_updates=settings.WEBHOOK_ALLOWED_UPDATES,
        )
        info = await bot.get_webhook_info()
        logger.info("Current webhook info: %s", info.to_dict())
    return ok


def main() -> None:
    """CLI entry point."""
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN is required")
        sys.exit(1)
    if not settings.WEBHOOK_URL:
        logger.error("WEBHOOK_URL is required, e.g. https://your-bot.example.com")
        sys.exit(1)

    try:
        ok = asyncio.run(set_webhook(settings.TELEGRAM_BOT_TOKEN, settings.WEBHOOK_URL))
    except TelegramError as exc:
        logger.error("Error setting webhook: %s", exc)
        sys.exit(1)
    if not ok:
        logger.error("Telegram refused the webhook")
        sys.exit(1)
    logger.info("Webhook set successfully")


if __name__ == "__main__":
    main()
