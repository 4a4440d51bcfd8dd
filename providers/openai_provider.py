"""
OpenAI judgment provider — gpt-4o-mini by default, any vision-capable chat model works.
"""
from __future__ import annotations

import base64
import logging
from typing import Optional

from openai import AsyncOpenAI

from providers.base import SYSTEM_PROMPT, JudgmentProvider, detect_mime

logger = logging.getLogger(__name__)


class OpenAIProvider(JudgmentProvider):

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        self.name = "openai"
        self.model_id = model
        self._client = AsyncOpenAI(api_key=api_key)

    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        if image_bytes is not None:
            b64 = base64.b64encode(image_bytes).decode()
            content = [
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:{detect_mime(image_bytes)};base64,{b64}",
                        "detail": "high",
                    },
                },
                {"type": "text", "text": prompt},
            ]
        else:
            content = prompt

        response = await self._client.chat.completions.create(
            model=self.model_id,
            max_tokens=1024,
            temperature=0,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": content},
            ],
        )
        return response.choices[0].message.content or ""
