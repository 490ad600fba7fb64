"""Add Chinese name/description/category fields to the catalog file."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from src.config import settings
from src.services.catalog_store import LoadError
from src.services.clients.decoder_client import get_decoder_client
from src.services.translation import ProductTranslator, TranslationReport

logger = logging.getLogger(__name__)


def create_translator() -> ProductTranslator:
    """Factory function to create a translator backed by the configured decoder.

    Without OPENROUTER_API_KEY the translator has no decoder, so every batch
    is degraded and products are written back untranslated.
    """
    decoder = get_decoder_client()
    if decoder is None:
        logger.warning("OPENROUTER_API_KEY not configured, products will stay untranslated")
    return ProductTranslator(decoder)


def read_catalog(path: Path) -> dict:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise LoadError(f"Could not read catalog {path}: {exc}") from exc
    if not isinstance(raw, dict) or not isinstance(raw.get("products"), list):
        raise LoadError("Invalid catalog format: products array not found")
    return raw


async def run_translation(
    input_path: Path,
    output_path: Path,
    translator: ProductTranslator | None = None,
) -> TranslationReport:
    """Translate every product and write the enriched catalog to ``output_path``."""

    catalog = read_catalog(input_path)
    translator = translator or create_translator()

    logger.info("Translating %d products from %s", len(catalog["products"]), input_path)
    report = await translator.translate_products(catalog["products"])

    catalog["products"] = report.products
    output_path.write_text(
        json.dumps(catalog, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info(
        "Wrote %d products to %s (%d/%d batches degraded)",
        len(report.products),
        output_path,
        len(report.degraded_batches),
        len(report.batches),
    )
    return report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", type=Path, default=Path(settings.CATALOG_PATH))
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Defaults to overwriting the input file",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    try:
        report = asyncio.run(run_translation(args.input, args.output or args.input))
    except KeyboardInterrupt:
        logger.info("Translation interrupted, catalog left unchanged")
        return
    except LoadError as exc:
        logger.error("Translation failed: %s", exc)
        sys.exit(1)
    if report.degraded_batches:
        logger.warning(
            "Batches left untranslated: %s",
            ", ".join(str(batch.index + 1) for batch in report.degraded_batches),
        )


if __name__ == "__main__":
    main()
