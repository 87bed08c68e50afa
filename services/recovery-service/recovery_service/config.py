from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SERVICE_NAME: str = "recovery-service"
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0

    WORKOUTS_SERVICE_URL: str = "http://workouts-service:8004"
    UPSTREAM_TIMEOUT_SECONDS: float = 5.0

    RECOVERY_LOOKBACK_DAYS: int = 30
    RECOVERY_SESSION_LIMIT: int = 60
    RECOVERY_RECENT_SESSIONS_LIMIT: int = 6
    RECOVERY_SUGGESTED_FOCUS_LIMIT: int = 5

    # Rest-window table overrides; JSON object of {"body part": hours}
    RECOVERY_DEFAULT_REST_WINDOW_HOURS: float = 48.0
    RECOVERY_REST_WINDOWS_JSON: str | None = None
    RECOVERY_REST_WINDOWS_PATH: str | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
