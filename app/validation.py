"""Validation of the city/date-range query accepted by the gateway."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import List, Optional

from app.errors import QueryValidationError, Violation

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

RULE_DATE_FORMAT = "date_format"
RULE_DATE_ORDER = "date_order"


@dataclass(frozen=True)
class WeatherQuery:
    """Validated request for one city and an optional date range."""
    city_name: str
    date1: Optional[str] = None
    date2: Optional[str] = None


def _parse_date(field: str, value: Optional[str], violations: List[Violation]) -> Optional[dt.date]:
    """Parse a YYYY-MM-DD value, recording a format violation on failure."""
    if value is None:
        return None
    parsed = None
    if DATE_PATTERN.match(value):
        try:
            parsed = dt.date.fromisoformat(value)
        except ValueError:
            parsed = None
    if parsed is None:
        violations.append(Violation(field, RULE_DATE_FORMAT, f"{field} must be in format yyyy-mm-dd"))
    return parsed


def validate_query(city_name: str, date1: Optional[str] = None, date2: Optional[str] = None) -> WeatherQuery:
    """
    Build a WeatherQuery or raise QueryValidationError listing every violation.

    Rules:
    - date1/date2, when present, must be YYYY-MM-DD calendar dates.
    - when both are well-formed, date2 must not precede date1.
    """
    violations: List[Violation] = []
    start = _parse_date("date1", date1, violations)
    end = _parse_date("date2", date2, violations)

    if start is not None and end is not None and end < start:
        violations.append(Violation("date2", RULE_DATE_ORDER, "date2 must be equal to or after date1"))

    if violations:
        raise QueryValidationError(violations)
    return WeatherQuery(city_name=city_name, date1=date1, date2=date2)
