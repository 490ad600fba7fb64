"""System-level routes such as health checks."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, status
from telegram.error import TelegramError

from src.api.dependencies import BotApplicationDependency, StorefrontDependency
from src.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def health_check(storefront: StorefrontDependency) -> dict:
    """Liveness probe reporting how many products are loaded."""

    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": settings.SERVICE_NAME,
        "products": len(storefront.catalog.snapshot.products),
    }


@router.get("/bot-info")
async def bot_info(application: BotApplicationDependency) -> dict:
    """Debug endpoint returning the bot's own Telegram profile."""

    try:
        me = await application.bot.get_me()
    except TelegramError as exc:
        logger.warning("getMe failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    return me.to_dict()
