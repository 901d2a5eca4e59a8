"""HTTP API for the weather cache gateway."""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from .cache_manager import cache_key, cache_status, get_cached, set_cached
from .validation import validate_query
from .weather_client import fetch_weather
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()


@router.get("/cache/{city_name}")
def get_weather(
    city_name: str,
    date1: Optional[str] = Query(default=None, description="Start date, YYYY-MM-DD"),
    date2: Optional[str] = Query(default=None, description="End date, YYYY-MM-DD"),
):
    """Return upstream weather for a city and optional date range, served from cache when possible."""
    key = cache_key(city_name, date1, date2)
    cached = get_cached(key)
    if cached is not None:
        logger.debug(f"Cache hit for {key}")
        return JSONResponse(content=cached, headers={"X-Cache": "HIT"})

    query = validate_query(city_name, date1, date2)
    logger.info(f"Cache miss for {key}; fetching upstream")
    payload = fetch_weather(query.city_name, query.date1, query.date2)
    set_cached(key, payload)
    return JSONResponse(content=payload, headers={"X-Cache": "MISS"})


@router.get("/health")
def health():
    """Report liveness and cache tier status."""
    return {"status": "ok", "cache": cache_status()}
