"""
Configuration management for the Exam Tutor Backend.
Handles environment variables and application settings.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from . import __version__

# Load environment variables
load_dotenv()

GEMINI_KEY_PREFIX = "AIza"
GEMINI_KEY_MIN_LENGTH = 30


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from environment
        frozen=True,
    )

    # API Configuration
    app_name: str = Field(default="Exam Tutor Backend")
    app_version: str = Field(default=__version__)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default=["*"])

    # Google Gemini Configuration
    gemini_api_key: Optional[str] = Field(default=None, repr=False)
    gemini_api_base: str = Field(default="https://generativelanguage.googleapis.com/v1beta/models")
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_timeout_seconds: float = Field(default=30.0, gt=0)

    # Document Processing Configuration
    max_document_chars: int = Field(default=8000, ge=1)
    max_file_size_mb: int = Field(default=10, ge=1)

    @property
    def gemini_endpoint(self) -> str:
        """Full generateContent URL for the configured model."""
        return f"{self.gemini_api_base.rstrip('/')}/{self.gemini_model}:generateContent"

    @property
    def api_key_loaded(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def api_key_length(self) -> int:
        return len(self.gemini_api_key or "")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


def validate_api_key_shape(settings: Settings) -> List[str]:
    """
    Check presence and superficial shape of the Gemini key.

    The result is diagnostic only: callers log the findings and carry on,
    a malformed key never prevents startup.

    Returns:
        List of human readable warnings, empty when the key looks fine
    """
    key = settings.gemini_api_key
    if not key:
        return ["GEMINI_API_KEY is not set; /chat and /ask will fail until it is configured."]

    warnings = []
    if len(key) < GEMINI_KEY_MIN_LENGTH:
        warnings.append(
            f"GEMINI_API_KEY looks too short ({len(key)} characters, expected at least {GEMINI_KEY_MIN_LENGTH})."
        )
    if not key.startswith(GEMINI_KEY_PREFIX):
        warnings.append(f"GEMINI_API_KEY does not start with the usual '{GEMINI_KEY_PREFIX}' prefix.")
    if key != key.strip():
        warnings.append("GEMINI_API_KEY has leading or trailing whitespace.")
    return warnings
