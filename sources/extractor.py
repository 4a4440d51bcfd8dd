"""
Extractor — one fetch against one catalog source, turned into either an
ingredients/packaging fragment or a list of candidate products.

Contract:
  • FetchError  → remote unreachable, timed out, or non-2xx status
  • ParseError  → body empty / undecodable / unparseable as markup
  • Missing elements are NOT errors — absent selectors just yield empty fields

Text rule for every selector: take each matched element's trimmed text and
keep the first occurrence of each distinct string (case-sensitive), in the
order they appear on the page.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlparse

import aiohttp
from bs4 import BeautifulSoup

import config
from errors import FetchError, ParseError
from models import CandidateProduct, ScrapedFragment
from sources.base import ProviderSpec

logger = logging.getLogger(__name__)

# Keywords that mark a packaging material when they appear in packaging text
MATERIAL_KEYWORDS = ("plastic", "cardboard", "glass", "metal", "paper")
RECYCLABLE_TOKEN  = "recycl"


def _headers() -> dict[str, str]:
    """Browser-like request headers; bare aiohttp user agents get bounced by most storefronts."""
    return {
        "User-Agent":      config.USER_AGENT,
        "Accept":          "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


# ── HTTP ──────────────────────────────────────────────────────────────────────

async def fetch_html(url: str, source: str = "") -> str:
    """Single GET with a bounded timeout. Returns the decoded body."""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=_headers(),
                timeout=aiohttp.ClientTimeout(total=config.FETCH_TIMEOUT),
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(
                        f"[{source}] HTTP {resp.status} for {url}",
                        source=source,
                        status=resp.status,
                    )
                try:
                    return await resp.text()
                except (UnicodeDecodeError, LookupError) as exc:
                    raise ParseError(f"[{source}] Undecodable body from {url}: {exc}", source=source) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise FetchError(f"[{source}] Fetch failed for {url}: {exc!r}", source=source) from exc


def parse_document(html: str, source: str = "") -> BeautifulSoup:
    if not html or not html.strip():
        raise ParseError(f"[{source}] Empty response body", source=source)
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise ParseError(f"[{source}] Markup could not be parsed: {exc}", source=source) from exc


# ── Selector helpers ──────────────────────────────────────────────────────────

def _texts(scope, selector: Optional[str]) -> list[str]:
    """Trimmed text of every match, first occurrence of each distinct string only."""
    if not selector:
        return []
    found: list[str] = []
    for el in scope.select(selector):
        text = el.get_text(" ", strip=True)
        if text and text not in found:
            found.append(text)
    return found


def _first_text(scope, selector: Optional[str]) -> str:
    texts = _texts(scope, selector)
    return texts[0] if texts else ""


def _first_attr(scope, selector: Optional[str], *attrs: str) -> Optional[str]:
    if not selector:
        return None
    for el in scope.select(selector):
        for attr in attrs:
            value = el.get(attr)
            if value and value.strip():
                return value.strip()
    return None


def _parse_price(price_str) -> Optional[float]:
    """Extract the numeric value from strings like '$29.99', '₹1,299', 'Rs. 349.00'."""
    if price_str is None:
        return None
    match = re.search(r"\d+(?:\.\d+)?", str(price_str).replace(",", ""))
    return float(match.group()) if match else None


def canonical_link(href: str, page_url: str) -> str:
    """Absolute form of *href* (relative links resolved against the page URL), minus any #fragment."""
    return urldefrag(urljoin(page_url, href.strip()))[0]


def scan_packaging(text: str, fragment: ScrapedFragment) -> None:
    """Flag recyclability and collect material keywords from one packaging string."""
    lowered = text.lower()
    if RECYCLABLE_TOKEN in lowered:
        fragment.recyclable = True
    for material in MATERIAL_KEYWORDS:
        if material in lowered and material not in fragment.packaging_materials:
            fragment.packaging_materials.append(material)


# ── Parsers ───────────────────────────────────────────────────────────────────

def parse_fragment(html: str, spec: ProviderSpec) -> ScrapedFragment:
    soup = parse_document(html, spec.name)
    fragment = ScrapedFragment(ingredients=_texts(soup, spec.ingredients))

    for text in _texts(soup, spec.packaging):
        scan_packaging(text, fragment)
        if text not in fragment.additional_info:
            fragment.additional_info.append(text)

    for text in _texts(soup, spec.description):
        if text not in fragment.additional_info:
            fragment.additional_info.append(text)

    return fragment


def parse_candidates(html: str, spec: ProviderSpec, page_url: str) -> list[CandidateProduct]:
    soup = parse_document(html, spec.name)
    if not spec.lists_products:
        return []

    host = urlparse(page_url).netloc
    items: list[CandidateProduct] = []
    for node in soup.select(spec.item):
        name = _first_text(node, spec.name_selector)
        href = _first_attr(node, spec.link, "href")
        if not name or not href:
            continue

        image = _first_attr(node, spec.image, "src", "data-src")
        items.append(CandidateProduct(
            name=name,
            brand=_first_text(node, spec.brand) or None,
            price=_parse_price(_first_text(node, spec.price)) if spec.price else None,
            image_url=urljoin(page_url, image) if image else None,
            canonical_link=canonical_link(href, page_url),
            source_host=host,
            description=" ".join(_texts(node, spec.description)),
        ))
    return items


# ── Public API ────────────────────────────────────────────────────────────────

async def extract_fragment(spec: ProviderSpec, term: str) -> ScrapedFragment:
    """Fetch *spec*'s search page for *term* and pull ingredients / packaging text from it."""
    url = spec.url_for(term)
    html = await fetch_html(url, spec.name)
    fragment = parse_fragment(html, spec)
    logger.debug(
        "[%s] '%s' → %d ingredient(s), materials=%s",
        spec.name, term, len(fragment.ingredients), fragment.packaging_materials,
    )
    return fragment


async def extract_candidates(spec: ProviderSpec, term: str) -> list[CandidateProduct]:
    """Fetch *spec*'s search page for *term* and return every product listed on it."""
    url = spec.url_for(term)
    html = await fetch_html(url, spec.name)
    items = parse_candidates(html, spec, url)
    logger.info("[%s] '%s' → %d listed item(s)", spec.name, term, len(items))
    return items
