from pathlib import Path
from typing import Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Concert Seat Hold Client'
    VERSION: str = '0.1.0'
    DEBUG: bool = False
    LOG_FILE_ENABLED: bool = False  # Write hourly log files under LOG_DIR

    # Backend API
    API_BASE_URL: str = 'http://localhost:8080/api'
    HTTP_REQUEST_TIMEOUT: float = 10.0  # Connect/read timeout for REST calls (seconds)

    @field_validator('API_BASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip('/')
        return v

    # Session
    AUTH_TOKEN: Optional[SecretStr] = None
    DEFAULT_USER_ID: str = 'user_test_123'

    # Seat event stream
    SSE_RECONNECT_BASE_DELAY: float = 1.0  # First reconnect delay (seconds), doubles per attempt
    SSE_RECONNECT_MAX_DELAY: float = 30.0  # Ceiling for the backoff delay (seconds)
    SSE_MAX_RECONNECT_ATTEMPTS: int = 10
    SSE_MANUAL_RECONNECT_DELAY: float = 0.1  # Delay before a user-triggered reconnect (seconds)

    # Seat holds
    HOLD_DEFAULT_TTL_SECONDS: int = 600
    HOLD_TIMER_TICK_SECONDS: float = 1.0


settings = Settings()  # type: ignore
