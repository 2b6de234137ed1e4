from datetime import datetime
from typing import List, Optional

from app.schemas.interview import DeepAnalysis, is_english, language_display_name

SEPARATOR = "================================================"

NEXT_STEPS = [
    "This preliminary report provides initial insights into your organizational DNA.",
    "For a complete assessment including:",
    "- 6 Hub Implementation Strategy",
    "- Team Alignment Recommendations",
    "- 90-Day Action Plan",
    "- Customized Organizational Blueprint",
    "",
    "Please schedule a follow-up consultation.",
]


def _section(lines: List[str], title: str, body: str) -> None:
    lines.append(title)
    lines.append("-" * len(title))
    lines.append(body.strip())
    lines.append("")


class ReportGenerator:
    """
    Renders the preliminary assessment as plain text.
    Pure formatting: the same inputs always produce the same text.
    """

    @staticmethod
    def generate_txt_report(
        founder_name: str,
        company_name: str,
        detected_language: str,
        transcript: str,
        quick_insights: Optional[str],
        deep_analysis: DeepAnalysis,
        generated_at: datetime,
        processing_seconds: float,
    ) -> str:
        """
        Generate the human-readable preliminary report.

        Args:
            founder_name: Founder name as submitted.
            company_name: Company name as submitted.
            detected_language: Language code of the original transcript.
            transcript: Original-language transcript (shown only when not English).
            quick_insights: Bullet summary, or None when the stage degraded.
            deep_analysis: Structured analysis from the deep-analysis stage.
            generated_at: Timestamp printed in the header.
            processing_seconds: Pipeline duration printed in the footer.

        Returns:
            Formatted report text.
        """
        language_name = language_display_name(detected_language)

        lines = []
        lines.append("ORGANIZATIONAL DNA ASSESSMENT - PRELIMINARY REPORT")
        lines.append(SEPARATOR)
        lines.append("")
        lines.append(f"Founder: {founder_name}")
        lines.append(f"Company: {company_name}")
        lines.append(f"Date: {generated_at.strftime('%Y-%m-%d')}")
        lines.append(f"Time: {generated_at.strftime('%H:%M:%S')}")
        lines.append(f"Language: {language_name}")
        lines.append("")

        if not is_english(detected_language):
            _section(lines, f"ORIGINAL TRANSCRIPT ({language_name})", transcript)

        _section(lines, "QUICK INSIGHTS", quick_insights or "Not available")

        analysis_body = "\n\n".join([
            f"1. Leadership DNA Pattern\n{deep_analysis.leadership_dna.strip()}",
            f"2. Core Organizational Challenge\n{deep_analysis.core_challenge.strip()}",
            f"3. Communication Style Assessment\n{deep_analysis.communication_style.strip()}",
            f"4. Immediate Action Item\n{deep_analysis.immediate_action.strip()}",
        ])
        _section(lines, "LEADERSHIP DNA ANALYSIS", analysis_body)

        _section(lines, "NEXT STEPS", "\n".join(NEXT_STEPS))

        lines.append(SEPARATOR)
        lines.append(f"Processing Time: {processing_seconds:.2f} seconds")

        return "\n".join(lines)
