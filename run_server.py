import os

import uvicorn

from app.config import settings
from utils.logging_utils import get_tagged_logger, mask_url, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def log_startup_config() -> None:
    """Log the upstream and cache endpoints the gateway will use."""
    if not settings.api_url:
        logger.warning("API_URL is not set; every upstream request will fail with 502")
    else:
        logger.info(f"Upstream weather API: {mask_url(settings.api_url)}")
    if not settings.api_key:
        logger.warning("API_KEY is not set; upstream requests carry an empty key")
    logger.info(f"Redis cache tier: {settings.redis_host}:{settings.redis_port} (enabled={settings.redis_enabled})")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weather_gateway")
    log_startup_config()

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
