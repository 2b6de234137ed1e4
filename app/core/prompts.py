from typing import Optional

QUICK_INSIGHTS_SYSTEM_PROMPT = "Extract key business insights in 3 bullet points."


def generate_transcription_prompt() -> str:
    """
    Generate the prompt for transcribing a founder recording with Gemini.

    Returns:
        The prompt string; the audio is attached as a separate part.
    """
    return (
        "Transcribe this recording of a founder talking about their company.\n"
        "Write down exactly what is said, in the language it is spoken. Do not translate or summarize.\n\n"
        "Return ONLY a JSON object with this structure:\n"
        "{\"transcript\": \"...\", \"language_code\": \"<ISO 639-1 code, e.g. en, hi>\", "
        "\"confidence\": <number between 0 and 1>}"
    )


def generate_translation_prompt(text: str, source_language: str) -> str:
    """
    Generate the prompt for translating a transcript into English.

    Args:
        text: The transcript to translate.
        source_language: Language code of the transcript.
    """
    return (
        f"Translate the following {source_language} text to English. "
        f"Return only the translation, nothing else:\n\n{text}"
    )


def generate_deep_analysis_prompt(transcript: str, quick_insights: Optional[str] = None) -> str:
    """
    Generate the prompt for the organizational deep analysis.

    Args:
        transcript: English transcript of the founder interview.
        quick_insights: Bullet summary from the quick-insight stage, when available.

    Returns:
        The formatted prompt string.
    """
    context_block = ""
    if quick_insights:
        context_block = f"Preliminary insights already extracted:\n{quick_insights}\n\n"

    return (
        "Analyze this founder interview transcript and provide:\n"
        "1. Leadership DNA Pattern (2-3 sentences)\n"
        "2. Core Organizational Challenge\n"
        "3. Communication Style Assessment\n"
        "4. One Immediate Action Item\n\n"
        "Keep it concise and actionable.\n\n"
        f"{context_block}"
        "Return ONLY a JSON object with this structure:\n"
        "{\"leadership_dna\": \"...\", \"core_challenge\": \"...\", "
        "\"communication_style\": \"...\", \"immediate_action\": \"...\"}\n\n"
        f"Transcript: {transcript}"
    )
