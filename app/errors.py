"""Error taxonomy for the gateway; each error maps to one HTTP outcome."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


class GatewayError(Exception):
    """Base class for errors surfaced directly to the caller."""
    status_code: int = 500


@dataclass(frozen=True)
class Violation:
    """A single failed validation rule."""
    field: str
    rule: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "rule": self.rule, "message": self.message}


class QueryValidationError(GatewayError):
    """Malformed query parameters; carries every violated rule."""
    status_code = 400

    def __init__(self, violations: List[Violation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(v.message for v in self.violations))


class TooManyRequests(GatewayError):
    """Caller exceeded one of the rate-limit windows."""
    status_code = 429

    def __init__(self, window: str, retry_after: int) -> None:
        self.window = window
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded ({window} window); retry after {retry_after}s")


class UpstreamError(GatewayError):
    """Upstream answered with a non-2xx status; body is relayed verbatim."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream returned HTTP {status_code}")


class TransportError(GatewayError):
    """Upstream could not be reached or returned an unusable response."""
    status_code = 502
