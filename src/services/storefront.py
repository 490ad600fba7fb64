"""Process-wide container for the catalog, carts, sessions and languages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.config import settings
from src.services.cart_store import CartStore, EntryIdFactory, uuid_entry_ids
from src.services.catalog_store import CatalogStore
from src.services.i18n import LanguageManager
from src.services.sessions import SearchSessionStore

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    """Explicitly constructed state shared by the bot handlers and HTTP routes."""

    catalog: CatalogStore
    carts: CartStore
    sessions: SearchSessionStore
    languages: LanguageManager = field(default_factory=LanguageManager)

    def close(self) -> None:
        self.sessions.clear()
        self.carts.reset()


def create_storefront(
    catalog_path: str | Path | None = None,
    *,
    id_factory: EntryIdFactory = uuid_entry_ids,
    search_timeout: float | None = None,
) -> Storefront:
    """Build a storefront around an unloaded catalog; call ``catalog.load()`` next."""

    catalog = CatalogStore(catalog_path or settings.CATALOG_PATH)
    storefront = Storefront(
        catalog=catalog,
        carts=CartStore(catalog, id_factory=id_factory),
        sessions=SearchSessionStore(
            timeout=search_timeout
            if search_timeout is not None
            else settings.SEARCH_SESSION_TIMEOUT_SECONDS
        ),
    )
    logger.debug("Storefront created for catalog %s", catalog.path)
    return storefront
