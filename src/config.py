"""
Configuration settings for the application.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Fixed catalog presentation constants
PRODUCTS_PER_PAGE = 5

PRICE_BRACKETS: tuple[dict, ...] = (
    {"label": "Under $50", "min": 0, "max": 49.99},
    {"label": "$50-$100", "min": 50, "max": 100},
    {"label": "$100-$200", "min": 100, "max": 200},
    {"label": "$200+", "min": 200, "max": 999999},
)

PLATFORM_EMOJIS: dict[str, str] = {
    "facebook": "📘",
    "gmail": "📧",
    "accounts": "🔗",
    "tiktok": "🎵",
    "instagram": "📷",
    "reddit": "🤖",
    "snapchat": "👻",
}

CATEGORY_EMOJIS: dict[str, str] = {
    "Personal Accounts": "👤",
    "Business Manager": "💼",
    "Fan Pages Reinstated": "📄",
    "Advertising Accounts": "📊",
    "Google General": "🌐",
    "Mixed Accounts": "🔄",
    "TikTok Accounts": "🎵",
    "Instagram Accounts": "📷",
    "Reddit Accounts": "🤖",
    "Telegram Accounts": "💬",
}


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "telegram-storefront-bot")

    # Telegram
    TELEGRAM_BOT_TOKEN: str | None = os.getenv("TELEGRAM_BOT_TOKEN")
    WEBHOOK_URL: str | None = os.getenv("WEBHOOK_URL")
    WEBHOOK_MAX_CONNECTIONS: int = int(os.getenv("WEBHOOK_MAX_CONNECTIONS", "40"))
    WEBHOOK_ALLOWED_UPDATES: list[str] = ["message", "callback_query"]

    # Catalog snapshot
    CATALOG_PATH: str = os.getenv("CATALOG_PATH", str(BASE_DIR / "data" / "products.json"))

    # Search mode expires when no follow-up text arrives in time
    SEARCH_SESSION_TIMEOUT_SECONDS: float = float(
        os.getenv("SEARCH_SESSION_TIMEOUT_SECONDS", "60")
    )

    # Manual fulfillment contacts shown at checkout
    SUPPORT_USERNAME: str = os.getenv("SUPPORT_USERNAME", "support_username")
    SUPPORT_EMAIL: str = os.getenv("SUPPORT_EMAIL", "support@example.com")

    # Translation / LLM settings
    OPENROUTER_API_KEY: str | None = os.getenv("OPENROUTER_API_KEY")
    OPENROUTER_BASE_URL: str = os.getenv(
        "OPENROUTER_BASE_URL",
        "https://openrouter.ai/api/v1",
    )
    TRANSLATION_MODEL: str = os.getenv(
        "TRANSLATION_MODEL",
        "meta-llama/llama-4-maverick:free",
    )
    TRANSLATION_BATCH_SIZE: int = int(os.getenv("TRANSLATION_BATCH_SIZE", "15"))
    TRANSLATION_RATE_LIMIT_SECONDS: float = float(
        os.getenv("TRANSLATION_RATE_LIMIT_SECONDS", "2")
    )
    TRANSLATION_BATCH_DELAY_SECONDS: float = float(
        os.getenv("TRANSLATION_BATCH_DELAY_SECONDS", "1")
    )
    TRANSLATION_TIMEOUT_SECONDS: float = float(
        os.getenv("TRANSLATION_TIMEOUT_SECONDS", "30")
    )

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def bot_enabled(self) -> bool:
        """Return True when a Telegram application can be initialized."""
        return bool(self.TELEGRAM_BOT_TOKEN)

    @property
    def translator_enabled(self) -> bool:
        """Return True when a decoder client for translations can be initialized."""
        return bool(self.OPENROUTER_API_KEY)

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
