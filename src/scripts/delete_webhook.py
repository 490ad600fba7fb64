"""Remove the bot's Telegram webhook."""

from __future__ import annotations

import asyncio
import logging
import sys

from telegram import Bot
from telegram.error import TelegramError

from src.config import settings

logger = logging.getLogger(__name__)


async def delete_webhook(token: str) -> bool:
    async with Bot(token) as bot:
        logger.info("Deleting webhook")
        return await bot.delete_webhook()


def main() -> None:
    """CLI entry point."""
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN is required")
        sys.exit(1)

    try:
        ok = asyncio.run(delete_webhook(settings.TELEGRAM_BOT_TOKEN))
    except TelegramError as exc:
        logger.error("Error deleting webhook: %s", exc)
        sys.exit(1)
    if not ok:
        logger.error("Telegram did not delete the webhook")
        sys.exit(1)
    logger.info("Webhook deleted successfully")


if __name__ == "__main__":
    main()
