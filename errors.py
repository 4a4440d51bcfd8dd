"""
errors.py — failure taxonomy for the enrichment pipeline.

Recoverable (the pipeline logs and moves on):
  FetchError, ParseError       — one catalog source failed; skip it
  CategorizationError          — only the similar-products path is lost
  ScoringError (per candidate) — that candidate gets no eco score

Fatal (propagated to the caller):
  IdentificationError          — nothing downstream is meaningful without a name
  ScoringError (main product)  — the report has no footprint to show
"""
from __future__ import annotations

from typing import Any, Optional


class EcoScanError(Exception):
    """Base exception for the pipeline."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class FetchError(EcoScanError):
    """Remote unreachable, timed out, or answered with a non-success status."""

    def __init__(
        self,
        message: str,
        source: str = "",
        status: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.source = source
        self.status = status


class ParseError(EcoScanError):
    """Response body could not be parsed at all."""

    def __init__(self, message: str, source: str = "", context: Optional[dict[str, Any]] = None):
        super().__init__(message, context)
        self.source = source


class IdentificationError(EcoScanError):
    """Vision reply could not be turned into an identity / attribute guess."""

    pass


class CategorizationError(EcoScanError):
    """Text reply could not be turned into a CategoryProfile."""

    pass


class ScoringError(EcoScanError):
    """Scoring reply was not the expected numeric structure."""

    pass
