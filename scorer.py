"""
scorer.py — turn an ingredients / packaging profile into a FootprintResult.

Accepts both detail shapes the model produces:
  "manufacturing": 72
  "manufacturing": {"score": 72, "explanation": "..."}
Numbers outside 0..100 are clamped; anything non-numeric is a ScoringError.
"""
from __future__ import annotations

import logging
from typing import Optional

from errors import ScoringError
from models import FOOTPRINT_DETAIL_KEYS, FootprintResult
from providers.base import JudgmentProvider

logger = logging.getLogger(__name__)


def _as_score(value, field_name: str) -> int:
    # bool is an int subclass — reject it explicitly
    if isinstance(value, bool):
        raise ScoringError(f"'{field_name}' is not a number: {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ScoringError(f"'{field_name}' is not a number: {value!r}") from None
    if not isinstance(value, (int, float)) or value != value:   # NaN check
        raise ScoringError(f"'{field_name}' is not a number: {value!r}")
    return int(round(min(100.0, max(0.0, float(value)))))


def parse_footprint(data: dict) -> FootprintResult:
    if "score" not in data:
        raise ScoringError("Scoring response has no 'score'", {"response": data})
    details_raw = data.get("details")
    if not isinstance(details_raw, dict):
        raise ScoringError("Scoring response has no 'details' object", {"response": data})

    details: dict[str, int] = {}
    explanations: dict[str, str] = {}
    for key in FOOTPRINT_DETAIL_KEYS:
        if key not in details_raw:
            raise ScoringError(f"Scoring response is missing details.{key}", {"response": data})
        entry = details_raw[key]
        if isinstance(entry, dict):
            details[key] = _as_score(entry.get("score"), f"details.{key}.score")
            explanation = entry.get("explanation")
            if isinstance(explanation, str) and explanation.strip():
                explanations[key] = explanation.strip()
        else:
            details[key] = _as_score(entry, f"details.{key}")

    overall: Optional[str] = data.get("overallExplanation") or data.get("overall_explanation")
    recommendations = data.get("recommendations") or []
    if not isinstance(recommendations, list):
        recommendations = []

    return FootprintResult(
        score=_as_score(data["score"], "score"),
        details=details,
        overall_explanation=overall.strip() if isinstance(overall, str) and overall.strip() else None,
        explanations=explanations,
        recommendations=tuple(str(r).strip() for r in recommendations if str(r).strip()),
    )


async def score(
    ingredients: list[str],
    packaging_materials: list[str],
    recyclable: bool,
    provider: JudgmentProvider,
) -> FootprintResult:
    try:
        data = await provider.score_footprint(ingredients, packaging_materials, recyclable)
    except Exception as exc:
        raise ScoringError(f"Could not score footprint: {exc}") from exc

    result = parse_footprint(data)
    logger.info("Footprint score %d %s", result.score, result.details)
    return result
