from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from dotenv import load_dotenv


# Get the path to the .env file
CONFIG_DIR = Path(__file__).resolve().parent
# .env lives in the project root (two levels up from app/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)


# Provider name -> settings attribute holding its credential
PROVIDER_CREDENTIALS: Dict[str, str] = {
    "deepgram": "DEEPGRAM_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "groq": "GROQ_API_KEY",
    "claude": "CLAUDE_API_KEY",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    DEBUG_MODE: bool = False
    LOG_JSON: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = [
        "https://smartdna.netlify.app",
        "https://smart-deep-neural-assessment-dna.onrender.com",
        "http://localhost:3000",
        "http://localhost:5000",
    ]

    # Provider credentials
    DEEPGRAM_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    GROQ_API_KEY: str = ""
    CLAUDE_API_KEY: str = ""

    # Provider models
    DEEPGRAM_MODEL: str = "nova-2"
    DEEPGRAM_BASE_URL: str = "https://api.deepgram.com/v1/listen"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_MAX_TOKENS: int = 200
    CLAUDE_MODEL: str = "claude-3-5-haiku-20241022"
    CLAUDE_MAX_TOKENS: int = 1000

    # Timeout Configuration (seconds, applied to every provider call)
    PROVIDER_TIMEOUT_SECONDS: float = 60.0

    # Pipeline gates
    MIN_TRANSCRIPT_CHARS: int = 50

    # File Upload Limits
    MAX_AUDIO_SIZE_MB: int = 10

    @property
    def max_audio_size_bytes(self) -> int:
        return self.MAX_AUDIO_SIZE_MB * 1024 * 1024

    def provider_status(self) -> Dict[str, bool]:
        """Presence (not validity) of each provider credential."""
        return {
            provider: bool(getattr(self, attr).strip())
            for provider, attr in PROVIDER_CREDENTIALS.items()
        }

    def missing_credentials(self) -> List[str]:
        """Names of the credential variables that are not set."""
        return [
            PROVIDER_CREDENTIALS[provider]
            for provider, present in self.provider_status().items()
            if not present
        ]


settings = Settings()


def get_settings() -> Settings:
    return settings
