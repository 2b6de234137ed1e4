"""
LLM adapters for the analysis stages.

- GroqQuickInsights: short bulleted summary (best-effort stage).
- ClaudeDeepAnalyzer: primary structured deep analysis.
- GeminiDeepAnalyzer: fallback structured deep analysis.
"""
import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.core.llm import get_chat_claude, get_chat_groq, get_genai_client
from app.core.prompts import QUICK_INSIGHTS_SYSTEM_PROMPT, generate_deep_analysis_prompt
from app.schemas.interview import DeepAnalysis
from app.services.pipeline.llm_parser import parse_llm_response
from app.services.providers.base import AnalysisRequest, ProviderAdapter, extract_message_text

logger = logging.getLogger(__name__)


class GroqQuickInsights(ProviderAdapter[str, str]):
    name = "groq"

    def __init__(self, chat: Optional[ChatGroq] = None, timeout: float = settings.PROVIDER_TIMEOUT_SECONDS):
        super().__init__(timeout=timeout)
        self._chat = chat

    @property
    def chat(self) -> ChatGroq:
        if self._chat is None:
            self._chat = get_chat_groq()
        return self._chat

    async def _call(self, transcript: str) -> str:
        messages = [
            SystemMessage(content=QUICK_INSIGHTS_SYSTEM_PROMPT),
            HumanMessage(content=transcript),
        ]
        response = await self.chat.ainvoke(messages)
        insights = extract_message_text(response.content)
        if not insights:
            raise ProviderError(self.name, "empty quick insights")
        return insights


class ClaudeDeepAnalyzer(ProviderAdapter[AnalysisRequest, DeepAnalysis]):
    name = "claude"

    def __init__(self, chat: Optional[ChatAnthropic] = None, timeout: float = settings.PROVIDER_TIMEOUT_SECONDS):
        super().__init__(timeout=timeout)
        self._chat = chat

    @property
    def chat(self) -> ChatAnthropic:
        if self._chat is None:
            self._chat = get_chat_claude()
        return self._chat

    async def _call(self, request: AnalysisRequest) -> DeepAnalysis:
        prompt = generate_deep_analysis_prompt(request.transcript, request.quick_insights)
        logger.info(f"Analyzing with Claude (prompt: {len(prompt)} chars)")

        response = await self.chat.ainvoke([HumanMessage(content=prompt)])
        analysis = parse_llm_response(extract_message_text(response.content), DeepAnalysis)
        return analysis.model_copy(update={"provider": self.name})


class GeminiDeepAnalyzer(ProviderAdapter[AnalysisRequest, DeepAnalysis]):
    name = "gemini-analysis"

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model: str = settings.GEMINI_MODEL,
        timeout: float = settings.PROVIDER_TIMEOUT_SECONDS,
    ):
        super().__init__(timeout=timeout)
        self._client = client
        self.model = model

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def _call(self, request: AnalysisRequest) -> DeepAnalysis:
        prompt = generate_deep_analysis_prompt(request.transcript, request.quick_insights)
        logger.info(f"Analyzing with Gemini (prompt: {len(prompt)} chars)")

        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=0.3,
                response_mime_type="application/json",
            ),
        )
        analysis = parse_llm_response(response.text or "", DeepAnalysis)
        return analysis.model_copy(update={"provider": self.name})
