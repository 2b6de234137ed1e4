"""
Provider adapters package.

Architecture:
- base.py: adapter contract, request models, timeout + error normalization
- stt.py: Deepgram (primary) and Gemini (fallback) speech-to-text
- translation.py: Gemini translation to English
- analysis.py: Groq quick insights, Claude (primary) and Gemini (fallback) deep analysis
"""
from dataclasses import dataclass
from typing import Sequence

from app.core.config import Settings
from app.schemas.interview import DeepAnalysis, TranscriptionResult

from .analysis import ClaudeDeepAnalyzer, GeminiDeepAnalyzer, GroqQuickInsights
from .base import AnalysisRequest, AudioPayload, ProviderAdapter, TranslationRequest
from .stt import DeepgramTranscriber, GeminiTranscriber
from .translation import GeminiTranslator


@dataclass(frozen=True)
class ProviderSet:
    """The adapters a pipeline run uses, in fallback order where a stage has several."""
    transcribers: Sequence[ProviderAdapter[AudioPayload, TranscriptionResult]]
    translator: ProviderAdapter[TranslationRequest, str]
    quick_insights: ProviderAdapter[str, str]
    analyzers: Sequence[ProviderAdapter[AnalysisRequest, DeepAnalysis]]


def build_default_providers(settings: Settings) -> ProviderSet:
    timeout = settings.PROVIDER_TIMEOUT_SECONDS
    return ProviderSet(
        transcribers=(
            DeepgramTranscriber(model=settings.DEEPGRAM_MODEL, base_url=settings.DEEPGRAM_BASE_URL, timeout=timeout),
            GeminiTranscriber(model=settings.GEMINI_MODEL, timeout=timeout),
        ),
        translator=GeminiTranslator(model=settings.GEMINI_MODEL, timeout=timeout),
        quick_insights=GroqQuickInsights(timeout=timeout),
        analyzers=(
            ClaudeDeepAnalyzer(timeout=timeout),
            GeminiDeepAnalyzer(model=settings.GEMINI_MODEL, timeout=timeout),
        ),
    )


__all__ = [
    "ProviderSet",
    "build_default_providers",
    "ProviderAdapter",
    "AudioPayload",
    "TranslationRequest",
    "AnalysisRequest",
    "DeepgramTranscriber",
    "GeminiTranscriber",
    "GeminiTranslator",
    "GroqQuickInsights",
    "ClaudeDeepAnalyzer",
    "GeminiDeepAnalyzer",
]
