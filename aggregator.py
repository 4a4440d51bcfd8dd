"""
aggregator.py — ingredient / packaging discovery across the source registry.

Walks the registry in its fixed priority order, merging each source's
fragment into one running result, and stops at the first point where the
running result holds at least one ingredient. A failing source is logged
and skipped; an empty result is a valid "no signal found" outcome.
"""
from __future__ import annotations

import logging
from typing import Iterable

from errors import FetchError, ParseError
from models import ScrapedFragment
from sources.base import ProviderSpec
from sources.extractor import extract_fragment
from sources.registry import SOURCES

logger = logging.getLogger(__name__)


async def aggregate(
    product_name: str,
    registry: Iterable[ProviderSpec] = SOURCES,
) -> ScrapedFragment:
    result = ScrapedFragment()
    consulted = 0

    for spec in registry:
        consulted += 1
        try:
            fragment = await extract_fragment(spec, product_name)
        except (FetchError, ParseError) as exc:
            logger.warning("[%s] Skipped for '%s': %s", spec.name, product_name, exc.message)
            continue

        result.merge(fragment)
        if result.has_ingredients:
            logger.info(
                "[%s] Found %d ingredient(s) for '%s' after %d source(s)",
                spec.name, len(result.ingredients), product_name, consulted,
            )
            break
    else:
        logger.info("No ingredients found for '%s' across %d source(s)", product_name, consulted)

    return result
