# trip_finder/config.py
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"

    # OpenAI
    OPENAI_API_KEY: str
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Autocomplete
    SUGGESTION_DEBOUNCE_MS: int = 150  # quiet period after the last keystroke
    SUGGESTION_MIN_CHARS: int = 2      # lookups fire only above this length
    SUGGESTION_LIMIT: int = 5

    # Sessions
    SESSION_TTL_SECONDS: int = 900  # 15 minutes idle session TTL

    # read .env; unrelated keys are ignored
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
