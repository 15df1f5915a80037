from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Record Context"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Remote record/prompt/callout service
    REMOTE_BASE_URL: str = "http://localhost:8080/services/apexrest"
    REMOTE_ACCESS_TOKEN: str | None = None
    REMOTE_TIMEOUT_SECONDS: float = 30.0

    CALLOUT_DEFAULT_NUM1: int = 15
    CALLOUT_DEFAULT_NUM2: int = 20


settings = Settings()  # type: ignore
