"""
Shared fixtures: fake provider adapters, settings with dummy credentials,
a fresh report store and a TestClient wired to both.
"""
import asyncio
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_providers
from app.core.config import Settings, get_settings
from app.main import app
from app.schemas.interview import DeepAnalysis, TranscriptionResult
from app.services.pipeline.interview_pipeline import InterviewPipeline
from app.services.providers import ProviderSet
from app.services.providers.base import ProviderAdapter
from app.services.report_store import ReportStore

LONG_TEXT = (
    "We are a 3-person SaaS startup struggling with churn. Our customers sign up, "
    "use the product for a month and then quietly leave."
)


class FakeAdapter(ProviderAdapter[Any, Any]):
    """Adapter returning a canned result (or raising) and recording every request."""

    def __init__(self, name: str, result: Any = None, error: Optional[Exception] = None,
                 delay: float = 0.0, timeout: float = 5.0):
        super().__init__(timeout=timeout)
        self.name = name
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: List[Any] = []

    async def _call(self, request: Any) -> Any:
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


def make_analysis(provider: str = "claude") -> DeepAnalysis:
    return DeepAnalysis(
        leadership_dna="Hands-on builder who leads by example.",
        core_challenge="Retention is not owned by anyone on the team.",
        communication_style="Direct and data-driven.",
        immediate_action="Assign a churn owner and review cancellations weekly.",
        provider=provider,
    )


@pytest.fixture
def fakes() -> SimpleNamespace:
    """One fake per provider slot; tests flip ``error`` to simulate outages."""
    return SimpleNamespace(
        primary_stt=FakeAdapter(
            "deepgram",
            TranscriptionResult(transcript=LONG_TEXT, language_code="en", confidence_percent=97.5, provider="deepgram"),
        ),
        fallback_stt=FakeAdapter(
            "gemini-stt",
            TranscriptionResult(transcript=LONG_TEXT + " (fallback)", language_code="en",
                                confidence_percent=80.0, provider="gemini-stt"),
        ),
        translator=FakeAdapter("gemini-translate", "Translated founder story about churn and retention problems."),
        quick_insights=FakeAdapter("groq", "- Small team\n- High churn\n- No retention owner"),
        primary_analysis=FakeAdapter("claude", make_analysis("claude")),
        fallback_analysis=FakeAdapter("gemini-analysis", make_analysis("gemini-analysis")),
    )


def all_calls(fakes: SimpleNamespace) -> int:
    return sum(len(adapter.calls) for adapter in vars(fakes).values())


@pytest.fixture
def providers(fakes) -> ProviderSet:
    return ProviderSet(
        transcribers=(fakes.primary_stt, fakes.fallback_stt),
        translator=fakes.translator,
        quick_insights=fakes.quick_insights,
        analyzers=(fakes.primary_analysis, fakes.fallback_analysis),
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        DEEPGRAM_API_KEY="dg-test-key",
        GEMINI_API_KEY="gemini-test-key",
        GROQ_API_KEY="groq-test-key",
        CLAUDE_API_KEY="claude-test-key",
        MIN_TRANSCRIPT_CHARS=50,
        MAX_AUDIO_SIZE_MB=1,
    )


@pytest.fixture
def store() -> ReportStore:
    return ReportStore()


@pytest.fixture
def pipeline(providers, store, test_settings) -> InterviewPipeline:
    return InterviewPipeline(providers=providers, store=store, settings=test_settings, correlation_id="test-run")


@pytest.fixture
def client(providers, store, test_settings):
    app.dependency_overrides[get_providers] = lambda: providers
    app.dependency_overrides[get_settings] = lambda: test_settings
    previous_store = app.state.report_store
    app.state.report_store = store

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
    app.state.report_store = previous_store
