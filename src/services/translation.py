"""Batch translation of catalog product text into Simplified Chinese."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field

from src.config import settings
from src.services.clients.decoder_client import DecoderClient

logger = logging.getLogger(__name__)

ProductRecord = dict[str, Any]


class TranslationError(Exception):
    """Raised when a decoder reply cannot be turned into translations."""


class BatchOutcome(BaseModel):
    index: int
    size: int
    status: Literal["translated", "degraded"]
    error: str | None = None


class TranslationReport(BaseModel):
    products: list[ProductRecord] = Field(default_factory=list)
    batches: list[BatchOutcome] = Field(default_factory=list)

    @property
    def degraded_batches(self) -> list[BatchOutcome]:
        return [batch for batch in self.batches if batch.status == "degraded"]


def build_translation_prompt(products: Sequence[ProductRecord]) -> str:
    products_data = [
        {
            "id": index,
            "name": product.get("name") or "",
            "description": product.get("description") or "",
            "category": product.get("category")
            or product.get("platform_category")
            or "General",
        }
        for index, product in enumerate(products)
    ]
    return (
        "Translate the following English advertising account products to Chinese "
        "(Simplified). These are digital social media accounts and advertising "
        "services for Chinese customers.\n\n"
        "PRODUCTS TO TRANSLATE:\n"
        f"{json.dumps(products_data, ensure_ascii=False, indent=2)}\n\n"
        "TRANSLATION RULES:\n"
        "1. Translate product names and descriptions from English to Chinese (Simplified)\n"
        '2. Keep brand names like "Facebook", "Instagram", "Gmail", "Google" in English\n'
        "3. Translate technical terms appropriately for Chinese users:\n"
        '   - "Business Manager" → "商业管理器"\n'
        '   - "Personal Accounts" → "个人账户"\n'
        '   - "Advertising Accounts" → "广告账户"\n'
        '   - "Fan Pages" → "粉丝页面"\n'
        '   - "Reinstated" → "已恢复"\n'
        '   - "UNLIMITED" → "无限制"\n'
        '   - "NO LIMIT" → "无限制"\n'
        "4. Convert currency symbols: $ → ¥ (but keep the numbers as they will be "
        "adjusted by pricing system)\n"
        "5. Translate account capabilities and features clearly for Chinese market\n"
        "6. Make descriptions professional and appealing to Chinese customers\n"
        "7. Keep technical specifications and numbers intact\n"
        "8. Translate common phrases:\n"
        '   - "Can create" → "可创建"\n'
        '   - "Can spend" → "可消费"\n'
        '   - "No ban risk" → "无封号风险"\n'
        '   - "Already created" → "已创建"\n'
        '   - "Currency can be changed" → "可更改货币"\n'
        '   - "Since first day" → "从第一天起"\n\n'
        "REQUIRED RESPONSE FORMAT (valid JSON only):\n"
        "{\n"
        '  "products": [\n'
        "    {\n"
        '      "id": 0,\n'
        '      "name": "Chinese translated name",\n'
        '      "description": "Chinese translated description",\n'
        '      "category": "Chinese translated category"\n'
        "    }\n"
        "  ]\n"
        "}\n\n"
        "Return only the JSON response, no additional text."
    )


def parse_translation_reply(reply: str) -> list[dict[str, Any]]:
    """Pull the outermost JSON object out of the reply and return its products."""

    start, end = reply.find("{"), reply.rfind("}")
    json_text = reply[start : end + 1] if start != -1 and end > start else reply
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise TranslationError(f"Decoder reply is not valid JSON: {exc}") from exc

    translated = data.get("products") if isinstance(data, dict) else None
    if not isinstance(translated, list):
        raise TranslationError("Invalid AI response format - missing products array")
    return [item for item in translated if isinstance(item, dict)]


def merge_translations(
    originals: Sequence[ProductRecord],
    translated: Sequence[dict[str, Any]],
) -> list[ProductRecord]:
    by_index = {item.get("id"): item for item in translated}
    merged: list[ProductRecord] = []
    for index, original in enumerate(originals):
        item = by_index.get(index)
        if item is None:
            merged.append(dict(original))
            continue
        category = original.get("category") or original.get("platform_category")
        merged.append(
            {
                **original,
                "name_zh": item.get("name") or original.get("name"),
                "description_zh": item.get("description") or original.get("description"),
                "category_zh": item.get("category") or category,
            }
        )
    return merged


class ProductTranslator:
    """Translates products through a decoder in rate-limited batches.

    A failed batch never fails the run: its products pass through unchanged
    and the batch is reported as ``degraded``.
    """

    def __init__(
        self,
        decoder: DecoderClient | None,
        *,
        batch_size: int = settings.TRANSLATION_BATCH_SIZE,
        rate_limit_seconds: float = settings.TRANSLATION_RATE_LIMIT_SECONDS,
        batch_delay_seconds: float = settings.TRANSLATION_BATCH_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._decoder = decoder
        self.batch_size = max(1, batch_size)
        self.rate_limit_seconds = rate_limit_seconds
        self.batch_delay_seconds = batch_delay_seconds
        self._clock = clock
        self._last_request: float | None = None
        self._cache: dict[str, str] = {}

    async def translate_batch(self, products: Sequence[ProductRecord]) -> list[ProductRecord]:
        if self._decoder is None:
            raise TranslationError("OPENROUTER_API_KEY not configured")

        await self._respect_rate_limit()
        logger.info("Translating batch of %d products to Chinese", len(products))
        reply = await self._decoder.decode(build_translation_prompt(products))
        translated = parse_translation_reply(reply)
        logger.info("Translated %d products to Chinese", len(translated))
        return merge_translations(products, translated)

    async def translate_products(self, products: Sequence[ProductRecord]) -> TranslationReport:
        report = TranslationReport()
        if not products:
            return report

        batch_count = -(-len(products) // self.batch_size)
        for index, start in enumerate(range(0, len(products), self.batch_size)):
            batch = list(products[start : start + self.batch_size])
            logger.info("Processing translation batch %d/%d", index + 1, batch_count)
            try:
                report.products.extend(await self.translate_batch(batch))
                report.batches.append(
                    BatchOutcome(index=index, size=len(batch), status="translated")
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Translation batch %d failed, using original text: %s", index + 1, exc
                )
                report.products.extend(dict(product) for product in batch)
                report.batches.append(
                    BatchOutcome(
                        index=index,
                        size=len(batch),
                        status="degraded",
                        error=str(exc),
                    )
                )

            if start + self.batch_size < len(products) and self.batch_delay_seconds > 0:
                await asyncio.sleep(self.batch_delay_seconds)

        return report

    async def translate_text(self, text: str, context: str = "") -> str:
        """Translate a short string; falls back to the input on any failure."""

        if self._decoder is None or not text or not isinstance(text, str):
            return text

        cache_key = f"zh_{text}_{context}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        hint = f" (context: {context})" if context else ""
        prompt = (
            f'Translate this English text to Chinese (Simplified){hint}: "{text}"\n\n'
            "Return only the Chinese translation, no additional text."
        )
        try:
            await self._respect_rate_limit()
            translated = (await self._decoder.decode(prompt, max_tokens=200)).strip()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Chinese text translation failed: %s", exc)
            return text

        self._cache[cache_key] = translated
        return translated

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _respect_rate_limit(self) -> None:
        now = self._clock()
        if self._last_request is not None and self.rate_limit_seconds > 0:
            wait = self.rate_limit_seconds - (now - self._last_request)
            if wait > 0:
                await asyncio.sleep(wait)
        self._last_request = self._clock()
