import asyncio
import logging
from typing import Optional

import google.generativeai as genai

from ...core.config import settings
from ...application.ports.ai_provider import AIProvider, AIAnalysis
from .response_normalizer import normalize_response

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """Analyze the following image from this URL: {image_url}. Provide:
- A short description of the image.
- Any emotions or scene context.
- Tags/keywords that describe it.

Format your response as JSON with the following structure:
{{
  "description": "A detailed description of what's in the image",
  "emotions": "Emotions or scene context detected in the image",
  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"]
}}"""


class GeminiProvider(AIProvider):
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self.model = None
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not configured")
            return
        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(
            self.model_name,
            generation_config={
                "temperature": settings.GEMINI_TEMPERATURE,
                "top_p": settings.GEMINI_TOP_P,
                "top_k": settings.GEMINI_TOP_K,
                "max_output_tokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
            },
        )

    async def generate_text(self, prompt: str) -> str:
        if self.model is None:
            raise RuntimeError("Gemini API key is not configured")
        chat = self.model.start_chat(history=[])
        result = await asyncio.wait_for(chat.send_message_async(prompt), timeout=self.timeout)
        return getattr(result, "text", str(result))

    async def analyze(self, image_url: str) -> AIAnalysis:
        response_text = await self.generate_text(ANALYSIS_PROMPT.format(image_url=image_url))
        logger.info(f"Gemini ({self.model_name}) returned {len(response_text)} characters")
        return normalize_response(response_text)
