"""Client for the upstream weather API: one city, optional date range."""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import requests

from app.config import settings
from app.errors import TransportError, UpstreamError
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="weather_client")

session = requests.Session()


def build_weather_path(city_name: str, date1: Optional[str] = None, date2: Optional[str] = None) -> str:
    """
    Compose the upstream path for a city and optional dates.

    city -> "city"; city+date1 -> "city/date1"; city+date1+date2 -> "city/date1/date2".
    date2 without date1 is ignored.
    """
    parts = [quote(city_name, safe="")]
    if date1:
        parts.append(date1)
        if date2:
            parts.append(date2)
    return "/".join(parts)


def build_weather_url(
    city_name: str,
    date1: Optional[str] = None,
    date2: Optional[str] = None,
    *,
    base_url: Optional[str] = None,
) -> str:
    """Return the upstream URL without credentials."""
    base = (base_url if base_url is not None else settings.api_url) or ""
    if not base:
        raise TransportError("Upstream API_URL is not configured")
    return f"{base.rstrip('/')}/{build_weather_path(city_name, date1, date2)}"


def fetch_weather(
    city_name: str,
    date1: Optional[str] = None,
    date2: Optional[str] = None,
    *,
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Any:
    """
    Fetch weather JSON for a city, making a single attempt.

    Raises
    ------
    UpstreamError
        Upstream answered with a non-2xx status; carries status and raw body.
    TransportError
        Upstream unreachable, timed out, not configured, or returned non-JSON.
    """
    url = build_weather_url(city_name, date1, date2, base_url=base_url)
    params = {"key": api_key if api_key is not None else (settings.api_key or "")}
    timeout = settings.upstream_timeout_seconds if timeout is None else timeout

    logger.debug(f"Requesting {mask_url(url)}")
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        logger.error(f"Upstream request to {mask_url(url)} failed: {exc.__class__.__name__}")
        raise TransportError(f"Upstream unreachable: {exc.__class__.__name__}") from exc

    if not 200 <= resp.status_code < 300:
        logger.warning(
            "Upstream returned an error",
            extra={"status_code": resp.status_code, "url": mask_url(url)},
        )
        raise UpstreamError(resp.status_code, resp.text)

    try:
        return resp.json()
    except ValueError as exc:
        logger.error(f"Upstream returned a non-JSON body for {mask_url(url)}")
        raise TransportError("Upstream returned an invalid JSON body") from exc
