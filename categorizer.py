"""
categorizer.py — expand a product name into a CategoryProfile.

The profile drives the similar-products search: product_type and
search_terms become shop queries, key_characteristics / target_use /
exclude_terms become the match filter. No retry — a failure here only
costs the similar-products list.
"""
from __future__ import annotations

import logging

from errors import CategorizationError
from models import CategoryProfile
from providers.base import JudgmentProvider

logger = logging.getLogger(__name__)


def _terms(value) -> list[str]:
    """Trimmed, non-empty strings; first occurrence kept."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if not isinstance(item, (str, int, float)):
            continue
        text = str(item).strip()
        if text and text not in out:
            out.append(text)
    return out


def _first(data: dict, *keys: str) -> object:
    """Accept both camelCase and snake_case keys from the model."""
    for key in keys:
        if key in data:
            return data[key]
    return None


async def categorize(product_name: str, provider: JudgmentProvider) -> CategoryProfile:
    try:
        data = await provider.categorize_product(product_name)
    except Exception as exc:
        raise CategorizationError(f"Could not categorize '{product_name}': {exc}") from exc

    product_type = _first(data, "productType", "product_type")
    if not isinstance(product_type, str) or not product_type.strip():
        raise CategorizationError(
            f"Could not categorize '{product_name}': response has no 'productType'",
            {"response": data},
        )

    profile = CategoryProfile(
        main_category=str(_first(data, "mainCategory", "main_category") or "").strip(),
        sub_category=str(_first(data, "subCategory", "sub_category") or "").strip(),
        product_type=product_type.strip(),
        target_use=_terms(_first(data, "targetUse", "target_use")),
        search_terms=_terms(_first(data, "searchTerms", "search_terms")),
        exclude_terms=_terms(_first(data, "excludeTerms", "exclude_terms")),
        key_characteristics=_terms(_first(data, "keyCharacteristics", "key_characteristics")),
    )
    logger.info(
        "Categorized '%s' → %s / %s / %s (%d search term(s))",
        product_name, profile.main_category, profile.sub_category,
        profile.product_type, len(profile.search_terms),
    )
    return profile
