"""
Provider Manager — picks and caches the judgment provider for this process.

Modes (config.JUDGE_PROVIDER):
  auto       — first provider with a key and not disabled: google → openai → anthropic
  google     — force Gemini
  openai     — force OpenAI
  anthropic  — force Anthropic

Per-provider kill switches (all default to true):
  ENABLE_GOOGLE=true/false
  ENABLE_OPENAI=true/false
  ENABLE_ANTHROPIC=true/false
"""
from __future__ import annotations

import logging
from typing import Optional

import config
from providers.base import JudgmentProvider

logger = logging.getLogger(__name__)

# Module-level cache — reset() clears it (tests, key rotation)
_provider: Optional[JudgmentProvider] = None

_AUTO_ORDER = ("google", "openai", "anthropic")


def _available() -> dict[str, bool]:
    return {
        "google":    bool(config.GOOGLE_API_KEY) and config.ENABLE_GOOGLE,
        "openai":    bool(config.OPENAI_API_KEY) and config.ENABLE_OPENAI,
        "anthropic": bool(config.ANTHROPIC_API_KEY) and config.ENABLE_ANTHROPIC,
    }


def _make(name: str) -> JudgmentProvider:
    if name == "google":
        from providers.gemini_provider import GeminiProvider
        return GeminiProvider(config.GOOGLE_API_KEY, config.GEMINI_MODEL)
    if name == "openai":
        from providers.openai_provider import OpenAIProvider
        return OpenAIProvider(config.OPENAI_API_KEY, config.OPENAI_MODEL)
    if name == "anthropic":
        from providers.anthropic_provider import AnthropicProvider
        return AnthropicProvider(config.ANTHROPIC_API_KEY, config.ANTHROPIC_MODEL)
    raise ValueError(f"Unknown judgment provider '{name}'. Choose one of: auto, {', '.join(_AUTO_ORDER)}")


def _build_provider() -> JudgmentProvider:
    mode = config.JUDGE_PROVIDER.strip().lower()
    available = _available()

    if mode != "auto":
        if mode in available and not available[mode]:
            raise RuntimeError(
                f"JUDGE_PROVIDER={mode} but its API key is not set (or ENABLE_{mode.upper()}=false)."
            )
        return _make(mode)

    for name in _AUTO_ORDER:
        if available[name]:
            logger.info("Auto-selected judgment provider: %s", name)
            return _make(name)

    raise RuntimeError(
        "No judgment provider configured.\n"
        "Set at least one of GOOGLE_API_KEY, OPENAI_API_KEY or ANTHROPIC_API_KEY."
    )


def get_provider() -> JudgmentProvider:
    """Return the active provider, building it once on first call."""
    global _provider
    if _provider is None:
        _provider = _build_provider()
        logger.info("Judgment provider: %s", _provider.full_name)
    return _provider


def reset() -> None:
    global _provider
    _provider = None
