from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_TIMEOUT_MS = 10000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ------------------------------------------------------------------
    # n8n connection
    # ------------------------------------------------------------------
    n8n_protocol: str = "http"
    n8n_host: str = "localhost"
    n8n_port: int = 5678
    n8n_api_key: Optional[str] = None       # required for every call, no default
    n8n_api_timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds

    # ------------------------------------------------------------------
    # Facade
    # ------------------------------------------------------------------
    cors_allow_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @field_validator("n8n_api_timeout", mode="before")
    @classmethod
    def _default_on_bad_timeout(cls, value):
        # Empty, zero or unparseable values fall back to the default.
        try:
            timeout = int(value)
        except (TypeError, ValueError):
            return DEFAULT_TIMEOUT_MS
        return timeout if timeout > 0 else DEFAULT_TIMEOUT_MS

    @property
    def n8n_base_url(self) -> str:
        return f"{self.n8n_protocol}://{self.n8n_host}:{self.n8n_port}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
