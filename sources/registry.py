"""
Source registry — the fixed, priority-ordered list of catalog / content sites.

Order matters: the aggregator walks this list top to bottom and stops at the
first source that yields an ingredient, so sources with the most reliable
ingredient panels come first.

Selectors drift whenever a site redesigns. A stale selector is not an error —
it simply yields empty fields and the pipeline falls through to the next
source (and ultimately to the vision fallback).
"""
from __future__ import annotations

from sources.base import ProviderSpec

# Open*Facts pages carry no prices, so these two only feed the ingredient walk
OPEN_FOOD_FACTS = ProviderSpec(
    name="openfoodfacts",
    search_url="https://world.openfoodfacts.org/cgi/search.pl?search_terms={query}&search_simple=1&action=process",
    ingredients="#panel_ingredients_content .panel_text, .ingredients-list li",
    packaging="#panel_packaging_content .panel_text, .packaging-components li",
)

OPEN_BEAUTY_FACTS = ProviderSpec(
    name="openbeautyfacts",
    search_url="https://world.openbeautyfacts.org/cgi/search.pl?search_terms={query}&search_simple=1&action=process",
    ingredients="#panel_ingredients_content .panel_text, .ingredients-list li",
    packaging="#panel_packaging_content .panel_text, .packaging-components li",
)

NYKAA = ProviderSpec(
    name="nykaa",
    search_url="https://www.nykaa.com/search/result/?q={query}",
    item="div.productWrapper",
    name_selector="div.css-xrzmfa",
    price="span.css-111z9ua",
    image="img.css-11gn9r6",
    link="a.css-qlopj4",
    description="div.css-1rd7vky",
    ingredients="#content-details .ingredients li, div.content-details p",
    packaging="div.packaging-details",
)

AMAZON_IN = ProviderSpec(
    name="amazon.in",
    search_url="https://www.amazon.in/s?k={query}",
    item="div.s-result-item[data-component-type='s-search-result']",
    name_selector="h2 span",
    price="span.a-price span.a-offscreen",
    image="img.s-image",
    link="h2 a, a.a-link-normal.s-no-outline",
    brand="span.a-size-base-plus.a-color-base",
    description="div.a-row.a-size-base.a-color-secondary",
    ingredients="#important-information .content p",
    packaging="#detailBullets_feature_div li",
)

FLIPKART = ProviderSpec(
    name="flipkart",
    search_url="https://www.flipkart.com/search?q={query}",
    item="div[data-id]",
    name_selector="a.wjcEIp, div.KzDlHZ, a.WKTcLC",
    price="div.Nx9bqj",
    image="img.DByuf4",
    link="a.wjcEIp, a.CGtC98, a.rPDeLR",
    brand="div.syl9yP",
    description="div.NqpwHC, ul.G4BRas li",
)

WALMART = ProviderSpec(
    name="walmart",
    search_url="https://www.walmart.com/search?q={query}",
    item="div[data-item-id]",
    name_selector="span[data-automation-id='product-title']",
    price="div[data-automation-id='product-price'] span.w_iUH7",
    image="img[data-testid='productTileImage']",
    link="a[link-identifier]",
    description="div[data-automation-id='product-description']",
)

# Fixed priority order — do not sort
SOURCES: tuple[ProviderSpec, ...] = (
    OPEN_FOOD_FACTS,
    OPEN_BEAUTY_FACTS,
    NYKAA,
    AMAZON_IN,
    FLIPKART,
    WALMART,
)


def get_source(name: str) -> ProviderSpec:
    for spec in SOURCES:
        if spec.name == name:
            return spec
    available = ", ".join(s.name for s in SOURCES)
    raise KeyError(f"Source '{name}' not registered. Available: {available}")
