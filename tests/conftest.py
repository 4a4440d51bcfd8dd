"""
Shared pytest fixtures.

FakeProvider stands in for every hosted model: each judgment type answers
with a canned reply (a string, an exception to raise, or a callable), and
every call is recorded so tests can assert on what was asked.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# ── Make the project root importable without installing the package ────────────
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from providers.base import ATTRIBUTES_PROMPT, IDENTIFY_PROMPT, JudgmentProvider  # noqa: E402


def _kind(prompt: str) -> str:
    if prompt == IDENTIFY_PROMPT:
        return "identify"
    if prompt == ATTRIBUTES_PROMPT:
        return "attributes"
    if prompt.startswith("Classify the product"):
        return "categorize"
    return "score"


class FakeProvider(JudgmentProvider):
    def __init__(self, **replies):
        self.name = "fake"
        self.model_id = "test"
        self.replies = replies
        self.calls: list[tuple[str, str, Optional[bytes]]] = []

    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        kind = _kind(prompt)
        self.calls.append((kind, prompt, image_bytes))
        reply = self.replies.get(kind)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return reply(prompt, image_bytes)
        if isinstance(reply, dict):
            return json.dumps(reply)
        if reply is None:
            raise AssertionError(f"FakeProvider has no reply for '{kind}'")
        return reply

    def count(self, kind: str) -> int:
        return sum(1 for k, _, _ in self.calls if k == kind)


SCORE_REPLY = {
    "score": 64,
    "details": {
        "manufacturing": 60,
        "transportation": 70,
        "packaging": 55,
        "lifecycle": 71,
    },
    "overallExplanation": "Mostly plant-based with a plastic bottle.",
}


@pytest.fixture
def fake_provider():
    return FakeProvider(
        identify={"name": "EcoSoap Bar", "brand": "EcoSoap"},
        attributes={
            "name": "EcoSoap Bar",
            "ingredients": ["Coconut Oil", "Shea Butter"],
            "packaging": {"materials": ["Paper"], "recyclable": True, "description": "Paper wrap"},
        },
        categorize={
            "mainCategory": "Personal Care",
            "subCategory": "Bath",
            "productType": "soap bar",
            "targetUse": ["bathing"],
            "searchTerms": ["natural soap"],
            "excludeTerms": ["liquid"],
            "keyCharacteristics": ["soap", "natural"],
        },
        score=SCORE_REPLY,
    )


@pytest.fixture(autouse=True)
def reset_provider_cache():
    """Each test starts with no cached judgment provider."""
    import providers.manager as manager_mod
    manager_mod._provider = None
    yield
    manager_mod._provider = None


def fake_aiohttp_session(status: int = 200, text: str = "", body: bytes = b"", get_side_effect=None):
    """Build a fake aiohttp.ClientSession whose get() yields one canned response."""
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.text = AsyncMock(return_value=text)
    mock_resp.read = AsyncMock(return_value=body)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)

    mock_session = MagicMock()
    if get_side_effect is not None:
        mock_session.get = MagicMock(side_effect=get_side_effect)
    else:
        mock_session.get = MagicMock(return_value=mock_resp)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return mock_session
