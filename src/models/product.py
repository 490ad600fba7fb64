"""Product domain models and catalog aggregates."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Product(BaseModel):
    """A sellable product as exported in the catalog snapshot."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(..., description="Opaque identifier, unique within a catalog")
    name: str
    description: str = ""
    price: float = Field(0, ge=0)
    stock: int = Field(0, ge=0, description="Available quantity, 0 = out of stock")
    platform: str = "Unknown"
    platform_category: str = "Uncategorized"
    name_zh: str | None = None
    description_zh: str | None = None
    category_zh: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("price", "stock", mode="before")
    @classmethod
    def _missing_number(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("platform", mode="before")
    @classmethod
    def _missing_platform(cls, value: Any) -> Any:
        return value or "Unknown"

    @field_validator("platform_category", mode="before")
    @classmethod
    def _missing_category(cls, value: Any) -> Any:
        return value or "Uncategorized"

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class CatalogFile(BaseModel):
    """Top-level shape of the exported catalog file."""

    shop: str | None = None
    exported_at: str | datetime | None = None
    products: list[Product]


class PriceBracket(BaseModel):
    """A named, inclusive price range used for stats and browsing."""

    model_config = ConfigDict(frozen=True)

    label: str
    min: float
    max: float

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max


class PlatformStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform: str
    total: int = 0
    in_stock: int = 0


class CategoryStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform_category: str
    total: int = 0
    in_stock: int = 0


class PriceBracketStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    min: float
    max: float
    total: int = 0
    in_stock: int = 0


class CatalogSummary(BaseModel):
    """Headline numbers shown on the statistics screen."""

    total_products: int
    in_stock: int
    out_of_stock: int
    unbracketed: int = Field(
        0,
        description="Products whose price falls into no configured bracket",
    )


class CatalogSnapshot(BaseModel):
    """Products of one load plus the aggregates derived from them."""

    model_config = ConfigDict(frozen=True)

    shop: str | None = None
    exported_at: str | datetime | None = None
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    products: tuple[Product, ...] = ()
    platform_stats: tuple[PlatformStat, ...] = ()
    category_stats: dict[str, tuple[CategoryStat, ...]] = Field(default_factory=dict)
    price_bracket_stats: tuple[PriceBracketStat, ...] = ()
    unbracketed: int = 0


StatT = TypeVar("StatT")


class StatsResult(BaseModel, Generic[StatT]):
    """Stats query outcome that keeps "no data" apart from "failed to fetch"."""

    status: Literal["ok", "degraded"] = "ok"
    items: list[StatT] = Field(default_factory=list)
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"
