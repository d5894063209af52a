"""Application configuration using pydantic-settings."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # API Settings
    app_name: str = "Google Translate Client"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Google Translate Settings
    google_translate_api_key: str = ""
    translate_url: str = "https://www.googleapis.com/language/translate/v2"
    detect_url: str = "https://www.googleapis.com/language/translate/v2/detect"
    attach_key: bool = True  # append ?key=... to the base URLs
    request_timeout: float = 10.0  # seconds

    # Default languages (None = must be given per call / auto-detected)
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None


settings = Settings()
