"""
Google Gemini judgment provider — uses the google-genai SDK (v1 API).

Gemini is the default in auto mode: flash models are cheap enough to run
once for the main product and once per alternative without thinking twice.
"""
from __future__ import annotations

import logging
from typing import Optional

from google import genai
from google.genai import types as genai_types

from providers.base import SYSTEM_PROMPT, JudgmentProvider, detect_mime

logger = logging.getLogger(__name__)


class GeminiProvider(JudgmentProvider):

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash"):
        self.name     = "google"
        self.model_id = model
        # Force v1 (stable) API
        self._client  = genai.Client(api_key=api_key, http_options={"api_version": "v1"})

    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        gen_config = genai_types.GenerateContentConfig(
            system_instruction=SYSTEM_PROMPT,
            temperature=0,
            max_output_tokens=1024,
        )

        contents: list = []
        if image_bytes is not None:
            contents.append(genai_types.Part.from_bytes(data=image_bytes, mime_type=detect_mime(image_bytes)))
        contents.append(prompt)

        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=gen_config,
        )
        return response.text or ""
