from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Ensure .env is read from the working directory (if present)
load_dotenv()

PLACEHOLDER_CALLBACK_URL = "https://your-public-url.com/webhook"
CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"


class Settings(BaseSettings):
    # Read .env by default. You can also export envs directly.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Output
    VAULT_DIR: Path = Path("Calendar")

    # Webhook listener
    CALLBACK_URL: str = PLACEHOLDER_CALLBACK_URL  # Public address Google calls back; replace before deploying
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000
    WEBHOOK_PATH: str = "/webhook"

    # Google Calendar
    GOOGLE_CREDENTIALS_PATH: Path = Path("credentials.json")
    GOOGLE_TOKEN_PATH: Path = Path("token.json")
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_SCOPES: List[str] = [CALENDAR_READONLY_SCOPE]
    MAX_RESULTS: int = 10
    WATCH_TTL_SECONDS: int = 86400  # Channel expires after 24 hours (needs renewal)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def callback_is_placeholder(self) -> bool:
        return self.CALLBACK_URL == PLACEHOLDER_CALLBACK_URL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings loaded from the environment and .env file."""
    return Settings()
