"""
Shared prompts, JSON extraction and the base class for all judgment providers.

A judgment provider is the one seam between the pipeline and a hosted model.
It exposes one method per judgment type; each returns the parsed JSON dict
and leaves shape validation to identifier.py / categorizer.py / scorer.py.
"""
from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

# ── Prompts (shared across all providers) ─────────────────────────────────────

SYSTEM_PROMPT = """You are an expert consumer-product and sustainability analyst.
Always answer with ONLY a valid JSON object — no markdown, no prose."""

IDENTIFY_PROMPT = """Identify the product in this photo.

JSON schema:
{
  "name":  "concise product name, brand + variant if visible",
  "brand": "brand name or null"
}"""

ATTRIBUTES_PROMPT = """Analyse this product image and describe what it is made of and how it is packed.

JSON schema:
{
  "name":        "concise product name",
  "ingredients": ["ingredient or material, most prominent first"],
  "packaging": {
    "materials":   ["plastic | cardboard | glass | metal | paper | other material"],
    "recyclable":  true or false,
    "description": "one sentence about the packaging"
  }
}"""

CATEGORIZE_PROMPT = """Classify the product "{product_name}" so that comparable alternatives can be found in online shops.

JSON schema:
{{
  "mainCategory":       "e.g. Personal Care",
  "subCategory":        "e.g. Hair Care",
  "productType":        "short shop search phrase for this kind of product, e.g. anti hair fall shampoo",
  "targetUse":          ["what the product is used for, e.g. hair fall"],
  "searchTerms":        ["2-4 alternative shop search phrases"],
  "excludeTerms":       ["words that mark related but functionally different products, e.g. oil"],
  "keyCharacteristics": ["3-6 short lowercase words or phrases that a matching product title would contain"]
}}"""

SCORE_PROMPT = """Calculate the carbon footprint score (0-100, higher = better for the environment) for a product with the following details:
Ingredients: {ingredients}
Packaging: {packaging}
Recyclable: {recyclable}

JSON schema:
{{
  "score": number,
  "details": {{
    "manufacturing":  {{"score": number, "explanation": "one sentence"}},
    "transportation": {{"score": number, "explanation": "one sentence"}},
    "packaging":      {{"score": number, "explanation": "one sentence"}},
    "lifecycle":      {{"score": number, "explanation": "one sentence"}}
  }},
  "overallExplanation": "two sentences at most",
  "recommendations":    ["up to 3 short tips for a greener choice"]
}}"""


# ── JSON extraction ───────────────────────────────────────────────────────────

def extract_json(raw: Optional[str], provider_name: str) -> dict:
    """
    Return the first well-formed JSON object found in a model reply.

    Tolerates markdown fences and prose before / after the object.
    Raises ValueError when no JSON object can be found.
    """
    text = (raw or "").strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])

    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)

    logger.error("[%s] Non-JSON response: %s", provider_name, (raw or "")[:300])
    raise ValueError(f"[{provider_name}] JSON parse error: no JSON object in response")


def detect_mime(image_bytes: bytes) -> str:
    """Sniff the image type from its magic bytes (default jpeg)."""
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if image_bytes[:4] == b"GIF8":
        return "image/gif"
    if image_bytes[:4] == b"RIFF":
        return "image/webp"
    return "image/jpeg"


# ── Abstract base ─────────────────────────────────────────────────────────────

class JudgmentProvider(ABC):
    """Base class all judgment providers must implement."""

    name: str           # e.g. "google"
    model_id: str       # e.g. "gemini-2.0-flash"

    @abstractmethod
    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        """Send one prompt (plus an optional image) and return the raw text reply."""
        ...

    @property
    def full_name(self) -> str:
        return f"{self.name}/{self.model_id}"

    async def _ask(self, kind: str, prompt: str, image_bytes: Optional[bytes] = None) -> dict:
        t0 = time.monotonic()
        raw = await self._generate(prompt, image_bytes)
        latency_ms = int((time.monotonic() - t0) * 1000)
        logger.info("[%s] %s answered in %dms", self.full_name, kind, latency_ms)
        return extract_json(raw, self.full_name)

    # ── One method per judgment type ──────────────────────────────────────────

    async def identify_product(self, image_bytes: bytes) -> dict:
        return await self._ask("identify", IDENTIFY_PROMPT, image_bytes)

    async def guess_attributes(self, image_bytes: bytes) -> dict:
        return await self._ask("attributes", ATTRIBUTES_PROMPT, image_bytes)

    async def categorize_product(self, product_name: str) -> dict:
        return await self._ask("categorize", CATEGORIZE_PROMPT.format(product_name=product_name))

    async def score_footprint(
        self,
        ingredients: list[str],
        packaging_materials: list[str],
        recyclable: bool,
    ) -> dict:
        prompt = SCORE_PROMPT.format(
            ingredients=", ".join(ingredients) or "unknown",
            packaging=", ".join(packaging_materials) or "unknown",
            recyclable="yes" if recyclable else "no",
        )
        return await self._ask("score", prompt)
