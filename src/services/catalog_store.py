"""In-memory catalog loaded from the exported JSON snapshot."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import ValidationError

from src.config import PRICE_BRACKETS
from src.models.product import (
    CatalogFile,
    CatalogSnapshot,
    CatalogSummary,
    CategoryStat,
    PlatformStat,
    PriceBracket,
    PriceBracketStat,
    Product,
    StatsResult,
)

logger = logging.getLogger(__name__)

_NOT_LOADED = "Catalog has not been loaded"


class LoadError(Exception):
    """Raised when the catalog source is missing or structurally invalid."""


def default_price_brackets() -> list[PriceBracket]:
    return [PriceBracket(**bracket) for bracket in PRICE_BRACKETS]


def build_snapshot(
    catalog: CatalogFile,
    brackets: Sequence[PriceBracket],
) -> CatalogSnapshot:
    """Compute every aggregate in a single pass over the products.

    Each product counts toward the first bracket (in configured order) whose
    inclusive range holds its price; prices matching none are tallied in
    ``unbracketed``.
    """

    platform_counts: dict[str, list[int]] = {}
    category_counts: dict[str, dict[str, list[int]]] = {}
    bracket_counts = [[0, 0] for _ in brackets]
    unbracketed = 0

    for product in catalog.products:
        stocked = int(product.in_stock)

        counts = platform_counts.setdefault(product.platform, [0, 0])
        counts[0] += 1
        counts[1] += stocked

        counts = category_counts.setdefault(product.platform, {}).setdefault(
            product.platform_category, [0, 0]
        )
        counts[0] += 1
        counts[1] += stocked

        for bracket, counts in zip(brackets, bracket_counts):
            if bracket.contains(product.price):
                counts[0] += 1
                counts[1] += stocked
                break
        else:
            unbracketed += 1

    return CatalogSnapshot(
        shop=catalog.shop,
        exported_at=catalog.exported_at,
        products=tuple(catalog.products),
        platform_stats=tuple(
            PlatformStat(platform=platform, total=total, in_stock=in_stock)
            for platform, (total, in_stock) in platform_counts.items()
        ),
        category_stats={
            platform: tuple(
                CategoryStat(platform_category=category, total=total, in_stock=in_stock)
                for category, (total, in_stock) in categories.items()
            )
            for platform, categories in category_counts.items()
        },
        price_bracket_stats=tuple(
            PriceBracketStat(
                label=bracket.label,
                min=bracket.min,
                max=bracket.max,
                total=total,
                in_stock=in_stock,
            )
            for bracket, (total, in_stock) in zip(brackets, bracket_counts)
        ),
        unbracketed=unbracketed,
    )


def parse_catalog(raw: object) -> CatalogFile:
    if not isinstance(raw, dict) or not isinstance(raw.get("products"), list):
        raise LoadError("Invalid catalog format: products array not found")
    try:
        catalog = CatalogFile.model_validate(raw)
    except ValidationError as exc:
        raise LoadError(f"Invalid product record in catalog: {exc}") from exc

    seen: set[str] = set()
    for product in catalog.products:
        if product.id in seen:
            raise LoadError(f"Duplicate product id in catalog: {product.id}")
        seen.add(product.id)
    return catalog


class CatalogStore:
    """Holds the current catalog snapshot; replaced wholesale on every load."""

    def __init__(
        self,
        path: str | Path,
        brackets: Iterable[PriceBracket] | None = None,
    ) -> None:
        self._path = Path(path)
        self._brackets = list(brackets) if brackets is not None else default_price_brackets()
        self._snapshot: CatalogSnapshot | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def brackets(self) -> list[PriceBracket]:
        return list(self._brackets)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> CatalogSnapshot:
        """Current snapshot, or an empty one before the first successful load."""
        return self._snapshot or CatalogSnapshot()

    def load(self) -> CatalogSnapshot:
        """Parse the catalog file and swap it in; the old snapshot survives failures."""

        logger.info("Loading products from %s", self._path)
        if not self._path.exists():
            raise LoadError(f"Products file not found at: {self._path}")
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise LoadError(f"Could not read catalog {self._path}: {exc}") from exc

        catalog = parse_catalog(raw)
        snapshot = build_snapshot(catalog, self._brackets)
        self._snapshot = snapshot

        logger.info(
            "Loaded %d products from shop %s (exported at %s)",
            len(snapshot.products),
            snapshot.shop,
            snapshot.exported_at,
        )
        if snapshot.unbracketed:
            logger.warning(
                "%d products have a price outside every price bracket",
                snapshot.unbracketed,
            )
        return snapshot

    def refresh(self) -> CatalogSnapshot:
        logger.info("Refreshing products from %s", self._path)
        return self.load()

    def get_product(self, product_id: str | int) -> Product | None:
        wanted = str(product_id)
        for product in self.snapshot.products:
            if product.id == wanted:
                return product
        return None

    def platform_stats(self) -> StatsResult[PlatformStat]:
        if self._snapshot is None:
            return StatsResult[PlatformStat](status="degraded", error=_NOT_LOADED)
        return StatsResult[PlatformStat](
            items=list(self._snapshot.platform_stats)
        )

    def category_stats(self, platform: str) -> StatsResult[CategoryStat]:
        if self._snapshot is None:
            return StatsResult[CategoryStat](status="degraded", error=_NOT_LOADED)
        stats = self._snapshot.category_stats.get(platform, ())
        return StatsResult[CategoryStat](items=list(stats))

    def price_bracket_stats(self) -> StatsResult[PriceBracketStat]:
        """Brackets that hold at least one product, in configured order."""
        if self._snapshot is None:
            return StatsResult[PriceBracketStat](status="degraded", error=_NOT_LOADED)
        return StatsResult[PriceBracketStat](
            items=[stat for stat in self._snapshot.price_bracket_stats if stat.total > 0]
        )

    def summary(self) -> CatalogSummary:
        products = self.snapshot.products
        in_stock = sum(1 for product in products if product.in_stock)
        return CatalogSummary(
            total_products=len(products),
            in_stock=in_stock,
            out_of_stock=len(products) - in_stock,
            unbracketed=self.snapshot.unbracketed,
        )
