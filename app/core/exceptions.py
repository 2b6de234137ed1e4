"""
Custom exceptions for the founder assessment service.

This module defines a hierarchy of exceptions used across the pipeline and the
FastAPI handlers that turn them into the `{success: false, ...}` envelope.
"""
import logging
from typing import List, Optional

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REMEDIATION_HINT = (
    "Please ensure you speak clearly for at least 30 seconds "
    "about your company and challenges."
)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InputValidationError(AppError):
    """Raised when the submission is missing input or the input is unusable."""
    pass


class ProviderError(AppError):
    """Raised by an adapter when its upstream provider call fails."""
    def __init__(self, provider: str, cause: Exception | str):
        self.provider = provider
        self.cause = cause
        super().__init__(f"{provider} failed: {cause}", {"provider": provider})


class PipelineError(AppError):
    """Raised when a pipeline stage exhausts every provider available to it."""
    def __init__(self, stage: str, message: str, causes: Optional[List[ProviderError]] = None):
        self.stage = stage
        self.causes = causes or []
        super().__init__(
            message,
            {"stage": stage, "providers": [c.message for c in self.causes]},
        )


class ReportNotFoundError(AppError):
    """Raised when a report id is unknown to the store."""
    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__("Report not found", {"report_id": report_id})


class ConfigurationError(AppError):
    """Exception raised when configuration is invalid or missing."""
    pass


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def validation_exception_handler(request: Request, exc: InputValidationError):
    logger.warning(f"Rejected submission: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message, "details": REMEDIATION_HINT},
    )


async def pipeline_exception_handler(request: Request, exc: PipelineError):
    logger.error(f"Pipeline failed at stage '{exc.stage}': {exc.message} {exc.details}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message, "details": REMEDIATION_HINT},
    )


async def report_not_found_handler(request: Request, exc: ReportNotFoundError):
    logger.info(f"Report lookup miss: {exc.report_id}")
    return JSONResponse(
        status_code=404,
        content={"success": False, "error": exc.message},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Processing failed", "details": REMEDIATION_HINT},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )
