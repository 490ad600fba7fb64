"""FastAPI dependencies resolving the shared storefront and bot application."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from telegram.ext import Application

from src.services.storefront import Storefront


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


def get_bot_application(request: Request) -> Application:
    """Return the Telegram application, or 503 when no bot token is configured."""

    application = getattr(request.app.state, "bot_application", None)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Telegram bot is not configured",
        )
    return application


StorefrontDependency = Annotated[Storefront, Depends(get_storefront)]
BotApplicationDependency = Annotated[Application, Depends(get_bot_application)]
