"""Telegram webhook receiver."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from src.api.dependencies import BotApplicationDependency
from src.bot.application import process_webhook_update

logger = logging.getLogger(__name__)

router = APIRouter(tags=["telegram"])


@router.post("/webhook", summary="Receive a Telegram update")
async def receive_update(request: Request, application: BotApplicationDependency) -> dict:
    """Feed the update to the bot; acknowledged with 200 once it parses as JSON.

    Handler failures are logged and reported to the user by the bot itself, so
    Telegram never retries a delivered update.
    """

    try:
        payload = await request.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Update body must be JSON",
        ) from exc
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Update body must be a JSON object",
        )

    logger.debug("Received webhook update %s", payload.get("update_id"))
    try:
        await process_webhook_update(application, payload)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Failed to process webhook update %s", payload.get("update_id"))
    return {"ok": True}
