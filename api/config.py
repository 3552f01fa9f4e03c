"""
API Configuration

All secrets loaded from environment variables.
NEVER hardcode API keys, access tokens, or credentials.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App info
    app_name: str = "OrderLine Bot"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Security - API Keys for admin endpoints (comma-separated list)
    api_keys: str = ""  # Loaded from API_KEYS env var

    # LINE Messaging API
    line_channel_access_token: str = ""  # Loaded from LINE_CHANNEL_ACCESS_TOKEN env var
    line_api_base: str = "https://api.line.me"
    line_data_api_base: str = "https://api-data.line.me"
    http_timeout_seconds: float = 10.0

    # Storage
    database_path: str = "./data/db/orderline.db"
    archive_dir: str = "./data/voice"
    voice_folder_id: str = "inbox"  # Loaded from VOICE_FOLDER_ID env var

    # Speech-to-Text
    google_application_credentials: Optional[str] = None  # Service account JSON path
    speech_language: str = "th-TH"
    speech_sample_rate: int = 16000
    source_audio_format: str = "m4a"

    # Processing
    reply_deadline_seconds: float = 20.0
    cas_max_attempts: int = 3

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def api_key_list(self) -> List[str]:
        """Parse comma-separated API keys."""
        if not self.api_keys:
            return []
        return [k.strip() for k in self.api_keys.split(",") if k.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
