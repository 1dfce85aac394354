import functools
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class YouTubeApiError(Exception):
    """Raised by the transport for any failed YouTube Data API call."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ChannelServiceError(Exception):
    status_code = 500
    error_code = "internal_error"
    default_message = "Unexpected server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ChannelServiceError):
    status_code = 400
    error_code = "invalid_input"
    default_message = "Invalid request parameter."


class NotFoundError(ChannelServiceError):
    status_code = 404
    error_code = "not_found"
    default_message = "Not found."


class UpstreamQuotaExceededError(ChannelServiceError):
    status_code = 500
    error_code = "youtube_quota_exhausted"
    default_message = "YouTube API quota is exhausted. Please try again later."


class UpstreamFailureError(ChannelServiceError):
    status_code = 500
    error_code = "youtube_upstream_failure"
    default_message = "Failed to fetch data from YouTube API."


def is_quota_exceeded_error(exc: Exception) -> bool:
    return "quota" in str(exc).lower()


def to_client_error(exc: Exception) -> ChannelServiceError:
    if getattr(exc, "status_code", None) == 404:
        return NotFoundError()
    if is_quota_exceeded_error(exc):
        return UpstreamQuotaExceededError()
    return UpstreamFailureError()


def translate_upstream_errors(func: F) -> F:
    """Turn transport failures into client-facing errors at a service boundary."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except YouTubeApiError as exc:
            logger.error("YouTube API error in %s: %s", func.__name__, exc)
            raise to_client_error(exc) from exc

    return wrapper  # type: ignore[return-value]
