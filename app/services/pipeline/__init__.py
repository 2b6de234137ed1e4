"""
Founder Interview Pipeline Package

Architecture:
- interview_pipeline.py: Stage sequencing and report assembly
- fallback.py: Ordered provider fallback and best-effort stages
- audio_validator.py: Recording validation
- upload_buffer.py: Size-limited reading of uploaded audio
- llm_parser.py: JSON extraction and schema validation for LLM output

Import InterviewPipeline from ``interview_pipeline`` directly; the provider
adapters import ``llm_parser`` from here, so this package stays import-light.
"""
