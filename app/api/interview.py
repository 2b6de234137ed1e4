import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_pipeline_factory, get_report_store
from app.core.config import Settings, get_settings
from app.schemas.interview import (
    HealthResponse,
    InputMode,
    InterviewSubmission,
    ProcessInterviewResponse,
    ReportResponse,
    language_display_name,
)
from app.services.pipeline.interview_pipeline import InterviewPipeline
from app.services.pipeline.upload_buffer import read_upload
from app.services.report_store import ReportStore

logger = logging.getLogger(__name__)

interview_router = APIRouter()


@interview_router.post("/process-interview", response_model=ProcessInterviewResponse)
async def process_interview(
    founderName: str = Form(""),
    companyName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    inputType: str = Form(InputMode.VOICE.value),
    textContent: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    audio: Optional[UploadFile] = File(None),
    pipeline_factory: Callable[[str], InterviewPipeline] = Depends(get_pipeline_factory),
    app_settings: Settings = Depends(get_settings),
):
    """
    Runs a founder interview through the assessment pipeline.

    Flow:
    1. Read the uploaded recording (if any) under the size limit
    2. Build the submission from the form fields
    3. Run the pipeline (validation, transcription, analysis, report)

    Failures surface through the exception handlers registered in ``app.main``.
    """
    input_mode = InputMode.TEXT if inputType == InputMode.TEXT.value else InputMode.VOICE
    pipeline = pipeline_factory(correlation_id=str(uuid.uuid4()))

    audio_bytes = await read_upload(audio, app_settings.max_audio_size_bytes)
    submission = InterviewSubmission(
        founder_name=founderName,
        company_name=companyName,
        email=email,
        phone=phone,
        input_mode=input_mode,
        audio=audio_bytes,
        audio_content_type=audio.content_type if audio is not None else None,
        text_content=textContent,
        requested_language=language,
    )
    report = await pipeline.run(submission)

    return ProcessInterviewResponse(
        reportId=report.id,
        partialReport=report.rendered_text,
        detectedLanguage=language_display_name(report.detected_language),
    )


@interview_router.get("/report/{report_id}", response_model=ReportResponse)
def get_report(report_id: str, store: ReportStore = Depends(get_report_store)):
    report = store.get(report_id)
    return ReportResponse(report=report.rendered_text, createdAt=report.created_at)


@interview_router.get("/health", response_model=HealthResponse)
def health(app_settings: Settings = Depends(get_settings)):
    return HealthResponse(
        services=app_settings.provider_status(),
        timestamp=datetime.now(timezone.utc),
    )
