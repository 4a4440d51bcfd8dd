"""
Anthropic judgment provider — claude-3-haiku by default.

Reads small print well, which helps with ingredient panels photographed
on the back of a pack.
"""
from __future__ import annotations

import base64
import logging
from typing import Optional

import anthropic

from providers.base import SYSTEM_PROMPT, JudgmentProvider, detect_mime

logger = logging.getLogger(__name__)


class AnthropicProvider(JudgmentProvider):

    def __init__(self, api_key: str, model: str = "claude-3-haiku-20240307"):
        self.name = "anthropic"
        self.model_id = model
        self._client = anthropic.AsyncAnthropic(api_key=api_key)

    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        content: list[dict] = []
        if image_bytes is not None:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": detect_mime(image_bytes),
                    "data": base64.b64encode(image_bytes).decode(),
                },
            })
        content.append({"type": "text", "text": prompt})

        message = await self._client.messages.create(
            model=self.model_id,
            max_tokens=1024,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": content}],
        )
        return "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
