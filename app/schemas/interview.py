from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Languages with a friendly name in responses and reports
LANGUAGE_NAMES = {
    "en": "English",
    "hi": "Hindi",
    "ta": "Tamil",
    "te": "Telugu",
}


def language_display_name(code: str) -> str:
    """Human-readable language name; unknown codes are returned verbatim."""
    return LANGUAGE_NAMES.get((code or "").lower(), code)


def is_english(code: Optional[str]) -> bool:
    normalized = (code or "en").lower()
    return normalized == "en" or normalized.startswith("en-")


# --- Pipeline Input ---

class InputMode(str, Enum):
    VOICE = "voice"
    TEXT = "text"


class InterviewSubmission(BaseModel):
    """A founder interview as received by the API."""
    founder_name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str = ""
    input_mode: InputMode = InputMode.VOICE
    audio: Optional[bytes] = Field(default=None, repr=False)
    audio_content_type: Optional[str] = None
    text_content: Optional[str] = None
    requested_language: Optional[str] = None


# --- Adapter Results ---

class TranscriptionResult(BaseModel):
    """Normalized output of a speech-to-text provider."""
    transcript: str
    language_code: str = "en"
    confidence_percent: float = Field(default=0.0, ge=0, le=100)
    provider: str = ""


class GeminiTranscription(BaseModel):
    """Schema the Gemini transcription prompt asks for."""
    transcript: str = Field(..., description="Verbatim transcript of the recording.")
    language_code: Optional[str] = Field(default="en", description="ISO 639-1 code of the spoken language.")
    confidence: float = Field(default=0.0, ge=0, le=1, description="Self-reported confidence 0-1.")


class DeepAnalysis(BaseModel):
    """Structured long-form assessment produced by a deep-analysis provider."""
    model_config = ConfigDict(frozen=True)

    leadership_dna: str = Field(..., min_length=1, description="Leadership DNA pattern, 2-3 sentences.")
    core_challenge: str = Field(..., min_length=1, description="Core organizational challenge.")
    communication_style: str = Field(..., min_length=1, description="Communication style assessment.")
    immediate_action: str = Field(..., min_length=1, description="One immediate action item.")
    provider: str = ""


# --- Pipeline State ---

class AnalysisBundle(BaseModel):
    """Per-request state accumulated between transcription and reporting."""
    transcript: str
    english_transcript: str
    detected_language: str = "en"
    quick_insights: Optional[str] = None
    deep_analysis: Optional[DeepAnalysis] = None
    degraded_stages: list[str] = Field(default_factory=list)


class Report(BaseModel):
    """The stored, user-facing assessment. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str
    founder_name: str
    company_name: str
    email: str
    phone: str
    transcript: str
    english_transcript: str
    detected_language: str
    quick_insights: Optional[str] = None
    deep_analysis: DeepAnalysis
    rendered_text: str
    created_at: datetime
    processing_time_ms: int
    degraded_stages: tuple[str, ...] = ()


# --- API Response Models ---

class ProcessInterviewResponse(BaseModel):
    success: bool = True
    reportId: str
    partialReport: str
    detectedLanguage: str
    message: str = "Assessment completed successfully"


class ReportResponse(BaseModel):
    success: bool = True
    report: str
    createdAt: datetime


class HealthResponse(BaseModel):
    status: str = "healthy"
    services: dict[str, bool]
    timestamp: datetime
