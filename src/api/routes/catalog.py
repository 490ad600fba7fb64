"""Catalog statistics and manual refresh."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from src.api.dependencies import StorefrontDependency
from src.services.catalog_store import LoadError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/stats")
async def catalog_stats(storefront: StorefrontDependency) -> dict:
    """Catalog summary plus the number of live cart entries."""

    summary = storefront.catalog.summary()
    snapshot = storefront.catalog.snapshot
    return {
        "loaded": storefront.catalog.is_loaded,
        "shop": snapshot.shop,
        "exported_at": snapshot.exported_at,
        "loaded_at": snapshot.loaded_at if storefront.catalog.is_loaded else None,
        **summary.model_dump(),
        "total_cart_items": storefront.carts.entry_count(),
    }


@router.post("/catalog/refresh", summary="Reload the catalog file")
async def refresh_catalog(storefront: StorefrontDependency) -> dict:
    """Swap in a freshly parsed catalog; the current one is kept on failure."""

    try:
        snapshot = storefront.catalog.refresh()
    except LoadError as exc:
        logger.error("Manual catalog refresh failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return {"status": "refreshed", "products": len(snapshot.products)}
