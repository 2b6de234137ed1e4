"""Common adapter contract for every external provider."""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from app.core.exceptions import ProviderError
from app.core.logger import log_async_execution_time

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


# --- Adapter Requests ---

class AudioPayload(BaseModel):
    """Raw recording handed to a speech-to-text provider."""
    data: bytes = Field(repr=False)
    content_type: str = "audio/webm"


class TranslationRequest(BaseModel):
    text: str
    source_language: str


class AnalysisRequest(BaseModel):
    transcript: str
    quick_insights: Optional[str] = None


def extract_message_text(value: Any) -> str:
    """Flatten chat-model content (plain string or list of content blocks) to text."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        parts = []
        for item in value:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and item.get("text"):
                parts.append(str(item["text"]))
        return "\n".join(parts).strip()
    return str(value or "").strip()


class ProviderAdapter(ABC, Generic[RequestT, ResultT]):
    """
    Wraps a single call to one external provider.

    Subclasses implement ``_call``; ``invoke`` applies the per-call timeout and
    turns every failure (transport, auth, timeout, malformed response) into a
    ``ProviderError``. Adapters never retry; fallback is the pipeline's job.
    """

    name: str = "provider"

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout

    @abstractmethod
    async def _call(self, request: RequestT) -> ResultT:
        ...

    @log_async_execution_time
    async def invoke(self, request: RequestT) -> ResultT:
        try:
            return await asyncio.wait_for(self._call(request), timeout=self.timeout)
        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            raise ProviderError(self.name, f"timed out after {self.timeout:.0f}s") from e
        except Exception as e:
            raise ProviderError(self.name, e) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, timeout={self.timeout})"
