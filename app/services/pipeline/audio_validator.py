"""Audio upload validation for the interview pipeline."""

from typing import Optional
import logging

from app.core.config import settings


class AudioValidator:
    """
    Validates recorded interviews before any provider is called.

    Responsibilities:
    - Reject empty recordings
    - Validate size (configurable max)

    The declared content type is only logged; the STT providers detect the
    container format themselves.
    """

    def __init__(self, logger: logging.Logger = None, max_size_mb: int = None):
        """
        Initialize audio validator.

        Args:
            logger: Logger instance (optional)
            max_size_mb: Maximum recording size in MB (optional, defaults to settings)
        """
        self.logger = logger or logging.getLogger(__name__)
        size_mb = max_size_mb if max_size_mb is not None else settings.MAX_AUDIO_SIZE_MB
        self.max_size_bytes = size_mb * 1024 * 1024

    def validate(self, audio: Optional[bytes], content_type: Optional[str] = None) -> None:
        """
        Validate a recording.

        Args:
            audio: Raw recording bytes
            content_type: MIME type declared by the client

        Raises:
            ValueError: If the recording is empty or too large
        """
        if not audio:
            raise ValueError("No audio file received")

        size = len(audio)
        if size > self.max_size_bytes:
            max_mb = self.max_size_bytes / (1024 * 1024)
            raise ValueError(
                f"Audio file too large: {size / (1024 * 1024):.1f}MB exceeds {max_mb:.0f}MB limit"
            )

        self.logger.info(f"Audio validation passed ({size / 1024:.1f}KB, {content_type or 'unknown type'})")
