"""Thin async wrapper around the OpenAI SDK."""

import logging
import re
from typing import Optional

from openai import AsyncOpenAI

from leadgen.config import Settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class LLMClient:
    """Text and image generation for campaign and enrichment helpers."""

    def __init__(self, api_key: str, model: str = "gpt-4.1-mini", image_model: str = "gpt-image-1"):
        self.model = model
        self.image_model = image_model
        self._client = AsyncOpenAI(api_key=api_key)

    async def complete(self, system_prompt: Optional[str], user_prompt: str) -> str:
        """Return the model's text reply ("" when it produced nothing)."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        response = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
        )
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    async def generate_image(self, prompt: str) -> Optional[str]:
        """Return a URL for a generated 1024x1024 image, if the API gave one."""
        response = await self._client.images.generate(
            model=self.image_model,
            prompt=prompt,
            size="1024x1024",
            n=1,
        )
        if response.data and response.data[0].url:
            return response.data[0].url
        return None

    async def close(self) -> None:
        await self._client.close()


def create_llm_client(settings: Settings) -> Optional[LLMClient]:
    """Build a client, or None when no API key is configured."""
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY missing - AI helpers will use fallbacks")
        return None
    return LLMClient(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        image_model=settings.OPENAI_IMAGE_MODEL,
    )


def extract_json(text: Optional[str]) -> Optional[str]:
    """
    Return the first balanced JSON object or array in a model reply.

    Tolerates ```json fences and prose around the payload.
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = _FENCE_RE.sub(r"\1", text.strip())
    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i >= 0]
    if not starts:
        return None

    start = min(starts)
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(cleaned)):
        ch = cleaned[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return cleaned[start:i + 1]
    return None
