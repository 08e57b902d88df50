"""
Domain exception taxonomy.

Each error carries the HTTP status it maps to; the app factory registers a
single handler that turns any BizPulseError into the standard error envelope.
"""

from typing import Optional


class BizPulseError(Exception):
    """Base class for all expected failures raised by the core."""

    status_code: int = 500

    def __init__(self, message: str, *, detail: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class ValidationError(BizPulseError):
    """Required input is missing or unusable."""

    status_code = 400

    def __init__(self, message: str, *, fields: Optional[list[str]] = None):
        super().__init__(message, detail={"fields": fields or []})
        self.fields = fields or []


class UnavailableError(BizPulseError):
    """The record store is not configured or failed its health check."""

    status_code = 503


class BucketingError(BizPulseError):
    """A recommendation reached the bucketer without a usable timeframe."""

    status_code = 500
