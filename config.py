"""
Central configuration — reads from .env file.

Every value is read once at import time. Tests and callers that need a
different value patch the module attribute directly (monkeypatch.setattr),
so all code reading config.X always gets the current value.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _model_enabled(env_key: str, default: bool = True) -> bool:
    """
    Check whether a specific judgment provider is enabled via an environment variable.
    Default is True; pass default=False to require explicit opt-in.
    """
    raw = os.getenv(env_key, "true" if default else "false")
    return raw.strip().lower() not in ("false", "0", "no")


# ── Remote judgment providers ─────────────────────────────────────────────────
# Add keys for whichever providers you have access to.
# Only providers whose keys are present are ever instantiated.
GOOGLE_API_KEY: str | None    = os.getenv("GOOGLE_API_KEY")
OPENAI_API_KEY: str | None    = os.getenv("OPENAI_API_KEY")
ANTHROPIC_API_KEY: str | None = os.getenv("ANTHROPIC_API_KEY")

# Which provider answers the vision / text / scoring prompts:
#   auto       → first provider with a key: google → openai → anthropic
#   google | openai | anthropic  → force one
JUDGE_PROVIDER: str = os.getenv("JUDGE_PROVIDER", "auto")

GEMINI_MODEL: str    = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
OPENAI_MODEL: str    = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307")

# Per-provider kill switches (all default to on)
ENABLE_GOOGLE: bool    = _model_enabled("ENABLE_GOOGLE")
ENABLE_OPENAI: bool    = _model_enabled("ENABLE_OPENAI")
ENABLE_ANTHROPIC: bool = _model_enabled("ENABLE_ANTHROPIC")

# ── Scraping ──────────────────────────────────────────────────────────────────
# Seconds before a single catalog fetch is abandoned and treated as a FetchError
FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "10"))

# Max simultaneous remote calls while searching / enriching alternatives
MAX_CONCURRENCY: int = int(os.getenv("MAX_CONCURRENCY", "5"))

USER_AGENT: str = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
)

# ── Similar-product matching ──────────────────────────────────────────────────
MAX_SIMILAR_PRODUCTS: int      = int(os.getenv("MAX_SIMILAR_PRODUCTS", "15"))
PRICE_WINDOW_LOW: float        = float(os.getenv("PRICE_WINDOW_LOW", "0.7"))
PRICE_WINDOW_HIGH: float       = float(os.getenv("PRICE_WINDOW_HIGH", "1.3"))
MIN_CHARACTERISTIC_HITS: int   = int(os.getenv("MIN_CHARACTERISTIC_HITS", "2"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
