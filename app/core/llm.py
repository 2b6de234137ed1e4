"""
Provider client configuration.

This module provides lazily-built clients for every external provider:
- ChatGroq for quick insights
- ChatAnthropic (Claude) for primary deep analysis
- GenAI SDK client for Gemini transcription, translation and fallback analysis
- A requests session for the Deepgram REST API

Clients are created on first use so the app can import without credentials.
"""
from functools import lru_cache

import requests
from google import genai
from langchain_anthropic import ChatAnthropic
from langchain_groq import ChatGroq

from app.core.config import settings


@lru_cache(maxsize=1)
def get_chat_groq() -> ChatGroq:
    """ChatGroq for quick insights (fast, short bulleted output)."""
    return ChatGroq(
        model=settings.GROQ_MODEL,
        temperature=0.2,
        api_key=settings.GROQ_API_KEY,
        max_tokens=settings.GROQ_MAX_TOKENS,
    )


@lru_cache(maxsize=1)
def get_chat_claude() -> ChatAnthropic:
    """ChatAnthropic for the primary deep analysis."""
    return ChatAnthropic(
        model=settings.CLAUDE_MODEL,
        temperature=0.3,
        api_key=settings.CLAUDE_API_KEY,
        max_tokens=settings.CLAUDE_MAX_TOKENS,
    )


@lru_cache(maxsize=1)
def get_genai_client() -> genai.Client:
    """Get or create the GenAI SDK client instance."""
    return genai.Client(api_key=settings.GEMINI_API_KEY)


@lru_cache(maxsize=1)
def get_deepgram_session() -> requests.Session:
    """Session carrying the Deepgram authorization header."""
    session = requests.Session()
    session.headers.update({"Authorization": f"Token {settings.DEEPGRAM_API_KEY}"})
    return session
