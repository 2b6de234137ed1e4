"""
Founder Interview Assessment Pipeline Orchestrator.

This module sequences one interview through the providers:
1. Input validation
2. Transcription (primary STT, then fallback)
3. Translation to English (best-effort)
4. Quick insights (best-effort)
5. Deep analysis (primary LLM, then fallback)
6. Report assembly and storage

Orchestration only: provider calls live in the adapters, fallback policy in
``fallback.py``, formatting in ``ReportGenerator``.
"""
from __future__ import annotations

import logging
import secrets
import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import InputValidationError, PipelineError
from app.core.logger import log_async_execution_time, set_correlation_id
from app.schemas.interview import (
    AnalysisBundle,
    InputMode,
    InterviewSubmission,
    Report,
    TranscriptionResult,
    is_english,
)
from app.services.pipeline.audio_validator import AudioValidator
from app.services.pipeline.fallback import best_effort, first_success
from app.services.providers import (
    AnalysisRequest,
    AudioPayload,
    ProviderSet,
    TranslationRequest,
)
from app.services.report_generator import ReportGenerator
from app.services.report_store import ReportStore

logger = logging.getLogger(__name__)

TRANSCRIPT_TOO_SHORT = "Transcript too short - please speak for at least 30 seconds about your company"


class PipelineStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    TRANSCRIBED = "transcribed"
    TRANSLATED = "translated"
    QUICK_INSIGHTED = "quick_insighted"
    DEEP_ANALYZED = "deep_analyzed"
    REPORTED = "reported"
    ERRORED = "errored"


def generate_report_id(accepted_at: datetime) -> str:
    """``RPT`` + acceptance time in ms + a random suffix against same-millisecond collisions."""
    return f"RPT{int(accepted_at.timestamp() * 1000)}{secrets.token_hex(2).upper()}"


class InterviewPipeline:
    """
    Runs a single interview submission from validation to a stored Report.

    One instance per request: it tracks the stage the run is in, and the
    stage a failure happened in (``failed_stage``). Nothing is stored unless
    the run reaches REPORTED.
    """

    def __init__(
        self,
        providers: ProviderSet,
        store: ReportStore,
        settings: Settings = default_settings,
        correlation_id: str = None,
    ):
        """
        Initialize the InterviewPipeline.

        Args:
            providers: Adapters for every stage, in fallback order
            store: Report store receiving the finished report
            settings: Settings holding the pipeline gates
            correlation_id: Optional request id for log tracking (auto-generated if not provided)
        """
        self.providers = providers
        self.store = store
        self.settings = settings
        self.audio_validator = AudioValidator(logger=logger, max_size_mb=settings.MAX_AUDIO_SIZE_MB)

        self.stage = PipelineStage.RECEIVED
        self.failed_stage: Optional[PipelineStage] = None

        self.correlation_id = correlation_id or str(uuid.uuid4())
        set_correlation_id(self.correlation_id)

    def _advance(self, stage: PipelineStage) -> None:
        logger.info(
            f"Stage {self.stage.value} -> {stage.value}",
            extra={"extra_data": {"stage": stage.value}},
        )
        self.stage = stage

    @log_async_execution_time
    async def run(self, submission: InterviewSubmission) -> Report:
        """
        Run the full pipeline for one submission.

        Returns:
            The stored Report.

        Raises:
            InputValidationError: Missing/invalid input or transcript too short.
            PipelineError: A stage exhausted all of its providers.
        """
        accepted_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()
        logger.info(
            f"New interview: founder='{submission.founder_name}', company='{submission.company_name}', "
            f"mode={submission.input_mode.value}"
        )

        try:
            self._validate(submission)
            self._advance(PipelineStage.VALIDATED)

            transcription = await self._transcribe(submission)
            self._advance(PipelineStage.TRANSCRIBED)

            bundle = AnalysisBundle(
                transcript=transcription.transcript,
                english_transcript=transcription.transcript,
                detected_language=transcription.language_code,
            )

            await self._translate(bundle)
            self._advance(PipelineStage.TRANSLATED)

            await self._quick_insights(bundle)
            self._advance(PipelineStage.QUICK_INSIGHTED)

            await self._deep_analysis(bundle)
            self._advance(PipelineStage.DEEP_ANALYZED)

            report = self._build_report(submission, bundle, accepted_at, start_time)
            self.store.put(report)
            self._advance(PipelineStage.REPORTED)
        except Exception as e:
            self.failed_stage = self.stage
            self._advance(PipelineStage.ERRORED)
            logger.error(f"Pipeline failed after stage '{self.failed_stage.value}': {type(e).__name__}: {e}")
            raise

        if bundle.degraded_stages:
            logger.warning(f"Report {report.id} completed with degraded stages: {bundle.degraded_stages}")
        logger.info(f"Report {report.id} complete in {report.processing_time_ms / 1000:.2f}s")
        return report

    # ---------------------------------------------------------
    # Stages
    # ---------------------------------------------------------

    def _uses_text(self, submission: InterviewSubmission) -> bool:
        return submission.input_mode == InputMode.TEXT and bool((submission.text_content or "").strip())

    def _validate(self, submission: InterviewSubmission) -> None:
        if self._uses_text(submission):
            return

        if submission.audio is None:
            raise InputValidationError("No audio file or text content provided")

        try:
            self.audio_validator.validate(submission.audio, submission.audio_content_type)
        except ValueError as e:
            raise InputValidationError(str(e)) from e

    async def _transcribe(self, submission: InterviewSubmission) -> TranscriptionResult:
        if self._uses_text(submission):
            language = (submission.requested_language or "en").strip().lower() or "en"
            logger.info(f"Text input: {len(submission.text_content)} chars, declared language '{language}'")
            result = TranscriptionResult(
                transcript=submission.text_content,
                language_code=language,
                confidence_percent=100.0,
                provider="text",
            )
        else:
            payload = AudioPayload(
                data=submission.audio,
                content_type=submission.audio_content_type or "audio/webm",
            )
            result = await first_success(
                self.providers.transcribers,
                payload,
                stage="transcription",
                failure_message="Both transcription services failed",
            )
            logger.info(
                f"Transcribed by {result.provider}: language={result.language_code}, "
                f"confidence={result.confidence_percent}%, length={len(result.transcript)}"
            )

        if len(result.transcript.strip()) < self.settings.MIN_TRANSCRIPT_CHARS:
            raise InputValidationError(
                TRANSCRIPT_TOO_SHORT,
                {"length": len(result.transcript.strip()), "minimum": self.settings.MIN_TRANSCRIPT_CHARS},
            )
        return result

    async def _translate(self, bundle: AnalysisBundle) -> None:
        if is_english(bundle.detected_language):
            return

        translated = await best_effort(
            self.providers.translator,
            TranslationRequest(text=bundle.transcript, source_language=bundle.detected_language),
            stage="translation",
        )
        if translated is None:
            bundle.degraded_stages.append("translation")
            return
        bundle.english_transcript = translated

    async def _quick_insights(self, bundle: AnalysisBundle) -> None:
        insights = await best_effort(
            self.providers.quick_insights,
            bundle.english_transcript,
            stage="quick_insights",
        )
        if insights is None:
            bundle.degraded_stages.append("quick_insights")
        bundle.quick_insights = insights

    async def _deep_analysis(self, bundle: AnalysisBundle) -> None:
        bundle.deep_analysis = await first_success(
            self.providers.analyzers,
            AnalysisRequest(transcript=bundle.english_transcript, quick_insights=bundle.quick_insights),
            stage="deep_analysis",
            failure_message="Both analysis services failed",
        )

    def _build_report(
        self,
        submission: InterviewSubmission,
        bundle: AnalysisBundle,
        accepted_at: datetime,
        start_time: float,
    ) -> Report:
        if bundle.deep_analysis is None:
            raise PipelineError(self.stage.value, "Analysis missing from completed pipeline")

        created_at = datetime.now(timezone.utc)
        processing_seconds = time.perf_counter() - start_time
        rendered = ReportGenerator.generate_txt_report(
            founder_name=submission.founder_name,
            company_name=submission.company_name,
            detected_language=bundle.detected_language,
            transcript=bundle.transcript,
            quick_insights=bundle.quick_insights,
            deep_analysis=bundle.deep_analysis,
            generated_at=created_at,
            processing_seconds=processing_seconds,
        )

        return Report(
            id=generate_report_id(accepted_at),
            founder_name=submission.founder_name,
            company_name=submission.company_name,
            email=submission.email,
            phone=submission.phone,
            transcript=bundle.transcript,
            english_transcript=bundle.english_transcript,
            detected_language=bundle.detected_language,
            quick_insights=bundle.quick_insights,
            deep_analysis=bundle.deep_analysis,
            rendered_text=rendered,
            created_at=created_at,
            processing_time_ms=int(processing_seconds * 1000),
            degraded_stages=tuple(bundle.degraded_stages),
        )
