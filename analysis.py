"""
analysis.py — public entry point of the enrichment pipeline.

The rest of the app imports only from here:
  from analysis import analyze_product

Flow:
  identify(image)                                   — fatal on failure
    ├── primary:  aggregate(name) → vision fallback → score   — fatal on failure
    └── similar:  categorize → find_candidates → enrich_candidates
                  — any failure on this branch just yields []

Both branches run concurrently; if the primary branch fails the similar
branch is cancelled and nothing partial is returned.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from aggregator import aggregate
from candidate_finder import enrich_candidates, find_candidates
from categorizer import categorize
from errors import CategorizationError
from identifier import ImageInput, guess_attributes, identify, load_image
from models import CandidateProduct, FootprintResult, PackagingInfo, ProductIdentity, ProductReport
from providers.base import JudgmentProvider
from providers.manager import get_provider
from scorer import score
from sources.base import ProviderSpec
from sources.registry import SOURCES

logger = logging.getLogger(__name__)

__all__ = ["analyze_product"]


async def _analyse_primary(
    identity: ProductIdentity,
    image_bytes: bytes,
    provider: JudgmentProvider,
    registry: tuple[ProviderSpec, ...],
) -> tuple[list[str], PackagingInfo, FootprintResult]:
    fragment = await aggregate(identity.name, registry)

    if fragment.has_ingredients:
        ingredients = list(fragment.ingredients)
        packaging = PackagingInfo(
            materials=list(fragment.packaging_materials),
            recyclable=fragment.recyclable,
        )
    else:
        logger.info("No catalog ingredients for '%s' — using vision fallback", identity.name)
        guess = await guess_attributes(image_bytes, provider)
        ingredients = guess.ingredients
        packaging = PackagingInfo(
            materials=guess.packaging_materials,
            recyclable=guess.recyclable,
            description=guess.packaging_description,
        )

    footprint = await score(ingredients, packaging.materials, packaging.recyclable, provider)
    return ingredients, packaging, footprint


async def _find_similar(
    identity: ProductIdentity,
    price: float,
    provider: JudgmentProvider,
    registry: tuple[ProviderSpec, ...],
) -> list[CandidateProduct]:
    try:
        profile = await categorize(identity.name, provider)
    except CategorizationError as exc:
        logger.warning("Similar products skipped: %s", exc.message)
        return []

    try:
        candidates = await find_candidates(identity.name, price, profile, registry)
        return await enrich_candidates(candidates, provider, registry)
    except Exception as exc:
        logger.error("Similar products search failed for '%s': %s", identity.name, exc)
        return []


async def analyze_product(
    image: ImageInput,
    price: float,
    provider: Optional[JudgmentProvider] = None,
    registry: Iterable[ProviderSpec] = SOURCES,
    include_similar: bool = True,
) -> ProductReport:
    """
    Analyse the product in *image* bought at *price*.

    Args:
        image:           raw image bytes or an http(s) URL.
        price:           positive purchase price (any currency; alternatives are compared in the same units).
        provider:        judgment provider; defaults to providers.manager.get_provider().
        registry:        catalog sources in priority order.
        include_similar: set False to skip the alternatives search entirely.

    Raises:
        IdentificationError / ScoringError / FetchError (image URL) on fatal failures.
    """
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price <= 0:
        raise ValueError(f"price must be a positive number, got {price!r}")

    provider = provider or get_provider()
    registry = tuple(registry)
    image_bytes = await load_image(image)

    identity = await identify(image_bytes, provider)

    similar_task: Optional[asyncio.Task] = None
    if include_similar:
        similar_task = asyncio.create_task(_find_similar(identity, float(price), provider, registry))

    try:
        ingredients, packaging, footprint = await _analyse_primary(identity, image_bytes, provider, registry)
    except BaseException:
        if similar_task is not None:
            similar_task.cancel()
        raise

    similar = await similar_task if similar_task is not None else []

    logger.info(
        "Analysis done for '%s': score=%d, %d ingredient(s), %d alternative(s)",
        identity.name, footprint.score, len(ingredients), len(similar),
    )
    return ProductReport(
        name=identity.name,
        brand=identity.brand,
        price=float(price),
        ingredients=ingredients,
        packaging=packaging,
        carbon_footprint=footprint,
        similar_products=similar,
    )
