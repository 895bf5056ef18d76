# brain_service/errors.py
"""
Error taxonomy.

Every failure the service reports to a caller is a BrainError. Each one knows
the HTTP status it maps to and the user-facing message; app.py turns them
into JSON bodies in a single exception handler.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BrainError(Exception):
    http_status: int = 500
    error: str = "Internal server error. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.error)

    def to_payload(self, debug: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if debug:
            payload["details"] = str(self)
        return payload


class InvalidInput(BrainError):
    http_status = 400
    error = "Message is required"


class NotConfigured(BrainError):
    error = "Claude AI not configured"


class PriceFeedUnavailable(BrainError):
    error = "Failed to fetch SOL price"


class UpstreamError(BrainError):
    """
    The completion provider answered with a non-2xx status, could not be
    reached (status_code is None), or returned something we can't use.
    """

    reason = "upstream error"

    def __init__(
        self,
        status_code: Optional[int] = None,
        body: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"{self.reason} (status={status_code})")


class UpstreamAuthFailure(UpstreamError):
    error = "API authentication failed. Please check server configuration."
    reason = "authentication failed"


class UpstreamRateLimited(UpstreamError):
    http_status = 429
    error = "Rate limit exceeded. Please try again later."
    reason = "rate limited"
    retry_after = 60

    def to_payload(self, debug: bool = False) -> Dict[str, Any]:
        payload = super().to_payload(debug)
        payload["retryAfter"] = self.retry_after
        return payload


class MalformedUpstreamResponse(UpstreamError):
    reason = "malformed response"


class WalletLookupError(Exception):
    """
    Balance lookup failed. Never surfaced to callers of /api/generate.
    """
