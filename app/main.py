import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from app.api.interview import interview_router
from app.core.config import Settings, settings
from app.core.exceptions import (
    ConfigurationError,
    InputValidationError,
    PipelineError,
    ReportNotFoundError,
    global_exception_handler,
    http_exception_handler,
    pipeline_exception_handler,
    report_not_found_handler,
    validation_exception_handler,
)
from app.core.logger import setup_logger
from app.services.report_store import ReportStore

setup_logger(
    log_level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO,
    use_json=settings.LOG_JSON,
)
logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "index.html"

# Multipart overhead on top of the audio limit
REQUEST_OVERHEAD_BYTES = 1024 * 1024


def ensure_credentials(app_settings: Settings) -> None:
    """Fail startup when any provider credential is missing."""
    missing = app_settings.missing_credentials()
    if missing:
        raise ConfigurationError(
            f"Missing provider credentials: {', '.join(missing)}",
            {"missing": missing},
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_credentials(settings)
    except ConfigurationError as e:
        logger.critical(e.message)
        raise
    logger.info(
        "Application startup: Founder Assessment Service on port %s | "
        "POST /api/process-interview | GET /api/report/{reportId} | GET /api/health",
        settings.PORT,
    )
    yield
    logger.info("Application shutdown")


app = FastAPI(
    title="Founder Assessment",
    description="Organizational DNA assessment from founder interviews.",
    version="1.0.0",
    lifespan=lifespan
)

app.state.report_store = ReportStore()

app.add_exception_handler(InputValidationError, validation_exception_handler)
app.add_exception_handler(PipelineError, pipeline_exception_handler)
app.add_exception_handler(ReportNotFoundError, report_not_found_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def enforce_upload_size(request: Request, call_next):
    if request.method == "POST" and request.url.path == "/api/process-interview":
        content_length = request.headers.get("content-length")
        limit = settings.max_audio_size_bytes + REQUEST_OVERHEAD_BYTES
        if content_length and content_length.isdigit() and int(content_length) > limit:
            return JSONResponse(
                status_code=413,
                content={"success": False, "error": f"Request too large. Max size is {limit} bytes."},
            )
    return await call_next(request)


app.include_router(interview_router, prefix="/api", tags=["interview"])


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return HTMLResponse(TEMPLATE_PATH.read_text(encoding="utf-8"))
