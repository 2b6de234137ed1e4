"""
Speech-to-text adapters.

- DeepgramTranscriber: primary, Deepgram pre-recorded REST API.
- GeminiTranscriber: fallback, Gemini multimodal transcription.
"""
import asyncio
import logging
from typing import Optional

import requests
from google import genai
from google.genai import types
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.core.llm import get_deepgram_session, get_genai_client
from app.core.prompts import generate_transcription_prompt
from app.schemas.interview import GeminiTranscription, TranscriptionResult
from app.services.pipeline.llm_parser import parse_llm_response
from app.services.providers.base import AudioPayload, ProviderAdapter

logger = logging.getLogger(__name__)


# --- Deepgram response shape (only the fields we read) ---

class _DeepgramAlternative(BaseModel):
    transcript: str = ""
    confidence: float = 0.0


class _DeepgramChannel(BaseModel):
    alternatives: list[_DeepgramAlternative]
    detected_language: Optional[str] = None


class _DeepgramResults(BaseModel):
    channels: list[_DeepgramChannel]


class _DeepgramResponse(BaseModel):
    results: _DeepgramResults


class DeepgramTranscriber(ProviderAdapter[AudioPayload, TranscriptionResult]):
    name = "deepgram"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        model: str = settings.DEEPGRAM_MODEL,
        base_url: str = settings.DEEPGRAM_BASE_URL,
        timeout: float = settings.PROVIDER_TIMEOUT_SECONDS,
    ):
        super().__init__(timeout=timeout)
        self._session = session
        self.model = model
        self.base_url = base_url

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = get_deepgram_session()
        return self._session

    def _post(self, audio: AudioPayload) -> dict:
        response = self.session.post(
            self.base_url,
            params={
                "model": self.model,
                "punctuate": "true",
                "smart_format": "true",
                "detect_language": "true",
            },
            headers={"Content-Type": audio.content_type},
            data=audio.data,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def _call(self, audio: AudioPayload) -> TranscriptionResult:
        logger.info(f"Transcribing with Deepgram ({len(audio.data)} bytes, {audio.content_type})")
        payload = await asyncio.to_thread(self._post, audio)

        parsed = _DeepgramResponse.model_validate(payload)
        if not parsed.results.channels or not parsed.results.channels[0].alternatives:
            raise ProviderError(self.name, "response contained no transcription alternatives")

        channel = parsed.results.channels[0]
        best = channel.alternatives[0]
        return TranscriptionResult(
            transcript=best.transcript.strip(),
            language_code=(channel.detected_language or "").strip().lower() or "en",
            confidence_percent=round(best.confidence * 100, 2),
            provider=self.name,
        )


class GeminiTranscriber(ProviderAdapter[AudioPayload, TranscriptionResult]):
    name = "gemini-stt"

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

    async def _call(self, audio: AudioPayload) -> TranscriptionResult:
        logger.info(f"Transcribing with Gemini ({len(audio.data)} bytes)")
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=[
                types.Part.from_bytes(data=audio.data, mime_type=audio.content_type),
                generate_transcription_prompt(),
            ],
            config=types.GenerateContentConfig(
                temperature=0.0,
                response_mime_type="application/json",
            ),
        )

        parsed = parse_llm_response(response.text or "", GeminiTranscription)
        return TranscriptionResult(
            transcript=parsed.transcript.strip(),
            language_code=(parsed.language_code or "").strip().lower() or "en",
            confidence_percent=round(parsed.confidence * 100, 2),
            provider=self.name,
        )
