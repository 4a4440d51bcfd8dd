"""
candidate_finder.py — find, filter, rank and enrich alternative products.

find_candidates():
  1. Query every product-listing source with product_type and each search term
  2. Keep items priced inside [price × 0.7, price × 1.3] (inclusive)
  3. Keep items whose name + description hit ≥ 2 characteristic / use terms
     and no exclude term
  4. De-duplicate by canonical link (first seen wins)
  5. Rank by characteristic hits (desc), then distance from the input price (asc)
  6. Return the top 15

enrich_candidates() then attaches ingredients, packaging and an eco score to
each survivor. One candidate failing never affects the others.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

import config
from aggregator import aggregate
from errors import FetchError, IdentificationError, ParseError
from identifier import guess_attributes
from models import UNAVAILABLE_INGREDIENTS, CandidateProduct, CategoryProfile, PackagingInfo
from providers.base import JudgmentProvider
from scorer import score
from sources.base import ProviderSpec
from sources.extractor import extract_candidates
from sources.registry import SOURCES

logger = logging.getLogger(__name__)


# ── Query matrix ──────────────────────────────────────────────────────────────

def build_queries(product_name: str, profile: CategoryProfile) -> list[str]:
    """product_type first, then every search term (blank entries skipped)."""
    base = profile.product_type.strip() or product_name.strip()
    return [base] + [t.strip() for t in profile.search_terms if t.strip()]


# ── Filters ───────────────────────────────────────────────────────────────────

def price_window(price: float) -> tuple[float, float]:
    return price * config.PRICE_WINDOW_LOW, price * config.PRICE_WINDOW_HIGH


def in_price_window(candidate_price: Optional[float], window: tuple[float, float]) -> bool:
    if not isinstance(candidate_price, (int, float)) or isinstance(candidate_price, bool):
        return False
    low, high = window
    # rounding keeps prices that sit exactly on a bound inside the window
    return round(low, 6) <= round(candidate_price, 6) <= round(high, 6)


def _haystack(candidate: CandidateProduct) -> str:
    return f"{candidate.name} {candidate.description}".lower()


def _hits(haystack: str, terms: Iterable[str]) -> int:
    return sum(1 for t in terms if t.strip() and t.strip().lower() in haystack)


def characteristic_hits(candidate: CandidateProduct, profile: CategoryProfile) -> int:
    """Ranking key: how many key characteristics the candidate's text mentions."""
    return _hits(_haystack(candidate), profile.key_characteristics)


def matches_profile(candidate: CandidateProduct, profile: CategoryProfile) -> bool:
    """Any exclude term vetoes; otherwise characteristic + use hits must reach the threshold."""
    haystack = _haystack(candidate)
    if _hits(haystack, profile.exclude_terms):
        return False
    hits = _hits(haystack, profile.key_characteristics) + _hits(haystack, profile.target_use)
    return hits >= config.MIN_CHARACTERISTIC_HITS


def dedupe(candidates: Iterable[CandidateProduct]) -> list[CandidateProduct]:
    seen: dict[str, CandidateProduct] = {}
    for candidate in candidates:
        if candidate.canonical_link not in seen:
            seen[candidate.canonical_link] = candidate
    return list(seen.values())


def rank(
    candidates: list[CandidateProduct],
    price: float,
    profile: CategoryProfile,
) -> list[CandidateProduct]:
    # sorted() is stable: full ties keep their first-seen order
    return sorted(
        candidates,
        key=lambda c: (-characteristic_hits(c, profile), abs(c.price - price)),
    )


# ── Fetching ──────────────────────────────────────────────────────────────────

async def _collect_listings(
    sources: list[ProviderSpec],
    queries: list[str],
) -> list[CandidateProduct]:
    """Run the source × query matrix with bounded concurrency; results come back in matrix order."""
    sem = asyncio.Semaphore(config.MAX_CONCURRENCY)

    async def _safe_extract(spec: ProviderSpec, term: str) -> list[CandidateProduct]:
        async with sem:
            try:
                return await extract_candidates(spec, term)
            except (FetchError, ParseError) as exc:
                logger.warning("[%s] Search '%s' failed: %s", spec.name, term, exc.message)
                return []

    batches = await asyncio.gather(*[
        _safe_extract(spec, term) for spec in sources for term in queries
    ])
    return [item for batch in batches for item in batch]


async def find_candidates(
    product_name: str,
    price: float,
    profile: CategoryProfile,
    registry: Iterable[ProviderSpec] = SOURCES,
) -> list[CandidateProduct]:
    sources = [s for s in registry if s.lists_products]
    queries = build_queries(product_name, profile)
    logger.info(
        "Searching alternatives for '%s': %d source(s) × %d quer(ies)",
        product_name, len(sources), len(queries),
    )

    listings = await _collect_listings(sources, queries)
    window = price_window(price)

    priced   = [c for c in listings if in_price_window(c.price, window)]
    matching = [c for c in priced if matches_profile(c, profile)]
    unique   = dedupe(matching)
    ranked   = rank(unique, price, profile)[:config.MAX_SIMILAR_PRODUCTS]

    logger.info(
        "Alternatives for '%s': %d listed → %d in price window → %d matching → %d unique → %d kept",
        product_name, len(listings), len(priced), len(matching), len(unique), len(ranked),
    )
    return ranked


# ── Enrichment ────────────────────────────────────────────────────────────────

async def _resolve_attributes(
    candidate: CandidateProduct,
    provider: JudgmentProvider,
    registry: Iterable[ProviderSpec],
) -> None:
    fragment = await aggregate(candidate.name, registry)
    if fragment.has_ingredients:
        candidate.ingredients = list(fragment.ingredients)
        candidate.packaging = PackagingInfo(
            materials=list(fragment.packaging_materials),
            recyclable=fragment.recyclable,
        )
        return

    if not candidate.image_url:
        raise IdentificationError(f"No ingredients found and no image to inspect for '{candidate.name}'")

    guess = await guess_attributes(candidate.image_url, provider)
    if not guess.ingredients:
        raise IdentificationError(f"Vision fallback found no ingredients for '{candidate.name}'")
    candidate.ingredients = guess.ingredients
    candidate.packaging = PackagingInfo(
        materials=guess.packaging_materials,
        recyclable=guess.recyclable,
        description=guess.packaging_description,
    )


async def _enrich_one(
    candidate: CandidateProduct,
    provider: JudgmentProvider,
    registry: Iterable[ProviderSpec],
    sem: asyncio.Semaphore,
) -> None:
    async with sem:
        try:
            await _resolve_attributes(candidate, provider, registry)
        except Exception as exc:
            logger.warning("Enrichment failed for '%s': %s", candidate.name, exc)
            candidate.ingredients = [UNAVAILABLE_INGREDIENTS]
            candidate.eco_score = None
            return

        try:
            result = await score(
                candidate.ingredients,
                candidate.packaging.materials,
                candidate.packaging.recyclable,
                provider,
            )
            candidate.eco_score = result.score
        except Exception as exc:
            logger.warning("Scoring failed for '%s': %s", candidate.name, exc)
            candidate.eco_score = None


async def enrich_candidates(
    candidates: list[CandidateProduct],
    provider: JudgmentProvider,
    registry: Iterable[ProviderSpec] = SOURCES,
) -> list[CandidateProduct]:
    """Attach ingredients, packaging and eco score to every candidate (in place, order kept)."""
    registry = tuple(registry)
    sem = asyncio.Semaphore(config.MAX_CONCURRENCY)
    await asyncio.gather(*[_enrich_one(c, provider, registry, sem) for c in candidates])
    return candidates
