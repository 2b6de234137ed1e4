import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.core.llm import get_genai_client
from app.core.prompts import generate_translation_prompt
from app.services.providers.base import ProviderAdapter, TranslationRequest

logger = logging.getLogger(__name__)


class GeminiTranslator(ProviderAdapter[TranslationRequest, str]):
    """Translates a transcript into English with Gemini."""

    name = "gemini-translate"

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model: str = settings.GEMINI_MODEL,
        timeout: float = settings.PROVIDER_TIMEOUT_SECONDS,
    ):
        super().__init__(timeout=timeout)
        self._client = client
        self.model = model

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def _call(self, request: TranslationRequest) -> str:
        logger.info(f"Translating {len(request.text)} chars from '{request.source_language}' to English")
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=generate_translation_prompt(request.text, request.source_language),
            config=types.GenerateContentConfig(temperature=0.0),
        )

        translated = (response.text or "").strip()
        if not translated:
            raise ProviderError(self.name, "empty translation")
        return translated
