"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather cache gateway."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_key: str | None = None
    api_url: str | None = None
    upstream_timeout_seconds: float = 10.0

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_enabled: bool = True
    redis_connect_timeout_seconds: float = 1.0

    cache_ttl_seconds: int = 60
    cache_max_entries: int = 5000
    cache_key_prefix: str = "weather:"

    rate_limit_enabled: bool = True
    trust_forwarded_for: bool = False

    log_level: str = "INFO"

    @field_validator("api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize base URLs to avoid double slashes."""
        if v is None:
            return None
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'api_key'})}")
