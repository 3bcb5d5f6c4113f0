from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

from promport.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    API_PREFIX: str = "/api"

    # promtool / Prometheus
    PROMTOOL_PATH: Optional[str] = None
    PROMETHEUS_URL: Optional[str] = "http://localhost:9090"
    TSDB_PATH: Optional[str] = None

    # Ceiling for output captured from a single promtool run
    MAX_OUTPUT_BYTES: int = 100 * 1024 * 1024

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    STATIC_DIR: str = "public"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    # Logging
    LOG_LEVEL: str = "info"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "./logs"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def missing(self, *keys: str) -> List[str]:
        """Return the keys among ``keys`` that are unset or blank."""
        absent = []
        for key in keys:
            value = getattr(self, key, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                absent.append(key)
        return absent

    def require(self, *keys: str) -> None:
        absent = self.missing(*keys)
        if absent:
            raise ConfigurationError(absent)


@lru_cache()
def get_settings() -> Settings:
    """
    FastAPI dependency returning the process-wide settings.
    Tests replace it through app.dependency_overrides.
    """
    return Settings()


settings = get_settings()
