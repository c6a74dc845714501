"""
Error Taxonomy (v1.0.0)
Exceptions shared by every pipeline stage.

UpstreamFailure and MalformedOutput are recovered inside the stage that
raised them. InvalidInput marks a caller contract violation.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)


# Upstream failure reasons (same external signal, distinct telemetry)
REASON_INVALID_CREDENTIALS = "invalid_credentials"
REASON_RATE_LIMITED = "rate_limited"
REASON_TIMEOUT = "timeout"
REASON_NOT_CONFIGURED = "not_configured"
REASON_UPSTREAM_ERROR = "upstream_error"


class StylistError(Exception):
    """Base error for the stylist pipeline."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UpstreamFailure(StylistError):
    """Network, auth or rate-limit failure from an external client."""
    def __init__(
        self,
        message: str,
        reason: str = REASON_UPSTREAM_ERROR,
        provider: str = "unknown",
        status_code: int = 502
    ):
        self.reason = reason
        self.provider = provider
        super().__init__(message, status_code=status_code)


class MalformedOutput(StylistError):
    """External response did not parse into the expected shape."""
    def __init__(self, message: str, raw: Optional[str] = None):
        self.raw = raw
        super().__init__(message, status_code=502)


class InvalidInput(StylistError):
    """Caller handed a stage something it must never receive."""
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message, status_code=status_code)


def _extract_status(exc: BaseException) -> Optional[int]:
    """Pull an HTTP status out of SDK / httpx exceptions."""
    # openai.APIStatusError
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status

    # httpx.HTTPStatusError
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status

    # google.api_core.exceptions.GoogleAPICallError
    status = getattr(exc, "code", None)
    if isinstance(status, int):
        return status

    return None


def upstream_failure_from(exc: BaseException, provider: str) -> UpstreamFailure:
    """
    Convert any client exception into an UpstreamFailure.

    401/403 become invalid_credentials, 429 becomes rate_limited,
    everything else is a generic upstream_error.
    """
    if isinstance(exc, UpstreamFailure):
        return exc

    status = _extract_status(exc)

    if status in (401, 403):
        reason = REASON_INVALID_CREDENTIALS
        logger.error(f"{provider}: invalid credentials ({status})")
    elif status == 429:
        reason = REASON_RATE_LIMITED
        logger.error(f"{provider}: rate limited")
    else:
        reason = REASON_UPSTREAM_ERROR
        logger.error(f"{provider}: upstream error ({status or 'no status'}): {exc}")

    return UpstreamFailure(
        f"{provider} call failed: {exc}",
        reason=reason,
        provider=provider
    )
