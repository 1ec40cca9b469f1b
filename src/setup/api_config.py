from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Settings for the event handler service, read from the environment or ``.env``."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "event-handler"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(
        default="production",
        description="'development' includes stack traces in error responses.",
    )
    FUNCTION_NAME: str = "event-handler-dev"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    EVENT_TIMEOUT_SECONDS: float | None = Field(
        default=None,
        description="Upper bound for a single dispatch; unset means no timeout.",
    )
    SIMULATED_DELAY_SCALE: float = Field(
        default=1.0,
        ge=0,
        description="Multiplier for the handlers' simulated work delays.",
    )

    STREAMS_ENABLED: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"
    EVENT_STREAM: str = "events"
    CONSUMER_GROUP: str = "event-handler"
    CONSUMER_NAME: str = "event-handler-1"
    STREAM_BLOCK_MS: int = 5000

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


@lru_cache
def get_api_settings() -> ApiSettings:
    return ApiSettings()
