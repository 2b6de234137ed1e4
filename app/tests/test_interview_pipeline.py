"""
Tests for the interview pipeline orchestrator: stage ordering, fallbacks,
degraded stages and the validation gates.
"""
import json
import re
from dataclasses import replace
from types import SimpleNamespace

import pytest

from app.core.exceptions import InputValidationError, PipelineError, ProviderError
from app.schemas.interview import InputMode, InterviewSubmission
from app.services.pipeline.interview_pipeline import InterviewPipeline, PipelineStage, TRANSCRIPT_TOO_SHORT
from app.services.providers import GeminiTranscriber

from conftest import LONG_TEXT, all_calls

AUDIO = b"RIFF....WAVEfmt fake recording bytes"


def text_submission(text: str = LONG_TEXT, language: str = "en") -> InterviewSubmission:
    return InterviewSubmission(
        founder_name="Asha Rao",
        company_name="ChurnLess Inc",
        email="asha@example.com",
        phone="+1 555 0100",
        input_mode=InputMode.TEXT,
        text_content=text,
        requested_language=language,
    )


def voice_submission(audio: bytes = AUDIO, content_type: str = "audio/webm") -> InterviewSubmission:
    return InterviewSubmission(
        founder_name="Asha Rao",
        company_name="ChurnLess Inc",
        email="asha@example.com",
        phone="+1 555 0100",
        input_mode=InputMode.VOICE,
        audio=audio,
        audio_content_type=content_type,
    )


@pytest.mark.asyncio
async def test_text_mode_english_skips_transcription_and_translation(pipeline, fakes, store):
    report = await pipeline.run(text_submission())

    assert pipeline.stage == PipelineStage.REPORTED
    assert report.english_transcript == LONG_TEXT
    assert report.detected_language == "en"
    assert fakes.primary_stt.calls == []
    assert fakes.translator.calls == []
    assert len(fakes.quick_insights.calls) == 1
    assert len(fakes.primary_analysis.calls) == 1
    assert re.fullmatch(r"RPT\d{13}[0-9A-F]{4}", report.id)
    assert store.get(report.id) == report


@pytest.mark.asyncio
async def test_rendered_report_contains_founder_and_company(pipeline):
    report = await pipeline.run(text_submission())

    assert "Founder: Asha Rao" in report.rendered_text
    assert "Company: ChurnLess Inc" in report.rendered_text
    assert "Hands-on builder who leads by example." in report.rendered_text


@pytest.mark.asyncio
async def test_missing_input_fails_before_any_provider(pipeline, fakes, store):
    submission = InterviewSubmission(founder_name="A", company_name="B", input_mode=InputMode.VOICE)

    with pytest.raises(InputValidationError, match="No audio file or text content provided"):
        await pipeline.run(submission)

    assert all_calls(fakes) == 0
    assert pipeline.failed_stage == PipelineStage.RECEIVED
    assert pipeline.stage == PipelineStage.ERRORED
    assert len(store) == 0


@pytest.mark.asyncio
async def test_text_mode_with_blank_text_and_no_audio_is_rejected(pipeline, fakes):
    with pytest.raises(InputValidationError, match="No audio file or text content provided"):
        await pipeline.run(text_submission(text="   "))

    assert all_calls(fakes) == 0


@pytest.mark.asyncio
async def test_empty_audio_is_rejected(pipeline, fakes):
    with pytest.raises(InputValidationError, match="No audio file received"):
        await pipeline.run(voice_submission(audio=b""))

    assert all_calls(fakes) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", ["application/ogg", "video/quicktime", "binary/octet-stream"])
async def test_any_declared_content_type_reaches_stt(pipeline, fakes, content_type):
    report = await pipeline.run(voice_submission(content_type=content_type))

    assert pipeline.stage == PipelineStage.REPORTED
    assert report.transcript == LONG_TEXT
    assert fakes.primary_stt.calls[0].content_type == content_type


@pytest.mark.asyncio
async def test_voice_mode_uses_primary_stt(pipeline, fakes):
    report = await pipeline.run(voice_submission())

    assert report.transcript == LONG_TEXT
    assert fakes.fallback_stt.calls == []
    assert fakes.primary_stt.calls[0].data == AUDIO
    assert fakes.primary_stt.calls[0].content_type == "audio/webm"


@pytest.mark.asyncio
async def test_primary_stt_failure_falls_back(pipeline, fakes):
    fakes.primary_stt.error = RuntimeError("401 Unauthorized")

    report = await pipeline.run(voice_submission())

    assert report.transcript == fakes.fallback_stt.result.transcript
    assert len(fakes.fallback_stt.calls) == 1
    assert report.degraded_stages == ()


@pytest.mark.asyncio
async def test_fallback_stt_blank_language_reports_english(providers, store, test_settings, fakes):
    class Models:
        def generate_content(self, **kwargs):
            return SimpleNamespace(text=json.dumps({"transcript": LONG_TEXT, "language_code": "", "confidence": 0.9}))

    fakes.primary_stt.error = RuntimeError("503 Service Unavailable")
    gemini = GeminiTranscriber(client=SimpleNamespace(models=Models()))
    pipeline = InterviewPipeline(
        providers=replace(providers, transcribers=(fakes.primary_stt, gemini)),
        store=store,
        settings=test_settings,
    )

    report = await pipeline.run(voice_submission())

    assert report.detected_language == "en"
    assert "Language: English" in report.rendered_text
    assert fakes.translator.calls == []


@pytest.mark.asyncio
async def test_both_stt_failures_store_nothing(pipeline, fakes, store):
    fakes.primary_stt.error = RuntimeError("connection reset")
    fakes.fallback_stt.error = ProviderError("gemini-stt", "quota exhausted")

    with pytest.raises(PipelineError) as exc_info:
        await pipeline.run(voice_submission())

    assert exc_info.value.message == "Both transcription services failed"
    assert exc_info.value.stage == "transcription"
    assert len(exc_info.value.causes) == 2
    assert len(store) == 0
    assert fakes.quick_insights.calls == []
    assert pipeline.failed_stage == PipelineStage.VALIDATED


@pytest.mark.asyncio
async def test_short_transcript_aborts(pipeline, fakes, store):
    fakes.primary_stt.result = fakes.primary_stt.result.model_copy(update={"transcript": "Hello, we sell shoes."})

    with pytest.raises(InputValidationError, match=re.escape(TRANSCRIPT_TOO_SHORT)):
        await pipeline.run(voice_submission())

    assert fakes.quick_insights.calls == []
    assert len(store) == 0


@pytest.mark.asyncio
async def test_short_text_input_aborts(pipeline, fakes):
    with pytest.raises(InputValidationError, match="Transcript too short"):
        await pipeline.run(text_submission(text="We sell shoes."))

    assert all_calls(fakes) == 0


@pytest.mark.asyncio
async def test_non_english_text_is_translated(pipeline, fakes):
    report = await pipeline.run(text_submission(language="hi"))

    assert fakes.translator.calls[0].source_language == "hi"
    assert fakes.translator.calls[0].text == LONG_TEXT
    assert report.english_transcript == fakes.translator.result
    assert fakes.quick_insights.calls == [fakes.translator.result]
    assert "ORIGINAL TRANSCRIPT (Hindi)" in report.rendered_text


@pytest.mark.asyncio
async def test_translation_failure_degrades_to_original(pipeline, fakes):
    fakes.translator.error = RuntimeError("503 Service Unavailable")

    report = await pipeline.run(text_submission(language="ta"))

    assert report.english_transcript == LONG_TEXT
    assert report.degraded_stages == ("translation",)
    assert len(fakes.primary_analysis.calls) == 1


@pytest.mark.asyncio
async def test_quick_insight_failure_still_reports(pipeline, fakes, store):
    fakes.quick_insights.error = RuntimeError("rate limited")

    report = await pipeline.run(text_submission())

    assert pipeline.stage == PipelineStage.REPORTED
    assert report.quick_insights is None
    assert report.degraded_stages == ("quick_insights",)
    assert fakes.primary_analysis.calls[0].quick_insights is None
    assert "QUICK INSIGHTS\n--------------\nNot available" in report.rendered_text
    assert store.get(report.id) is report


@pytest.mark.asyncio
async def test_quick_insights_feed_deep_analysis(pipeline, fakes):
    await pipeline.run(text_submission())

    request = fakes.primary_analysis.calls[0]
    assert request.transcript == LONG_TEXT
    assert request.quick_insights == fakes.quick_insights.result


@pytest.mark.asyncio
async def test_deep_analysis_falls_back(pipeline, fakes):
    fakes.primary_analysis.error = RuntimeError("overloaded")

    report = await pipeline.run(text_submission())

    assert report.deep_analysis.provider == "gemini-analysis"


@pytest.mark.asyncio
async def test_deep_analysis_exhaustion_fails_request(pipeline, fakes, store):
    fakes.primary_analysis.error = RuntimeError("overloaded")
    fakes.fallback_analysis.error = ValueError("Failed to parse DeepAnalysis")

    with pytest.raises(PipelineError, match="Both analysis services failed"):
        await pipeline.run(text_submission())

    assert pipeline.failed_stage == PipelineStage.QUICK_INSIGHTED
    assert len(store) == 0


@pytest.mark.asyncio
async def test_report_records_processing_time(pipeline):
    report = await pipeline.run(text_submission())

    assert report.processing_time_ms >= 0
    assert "Processing Time:" in report.rendered_text
    assert report.created_at.tzinfo is not None
