"""
Service layer exceptions.
"""

from enum import Enum


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, service_id: str | None = None):
        self.service_id = service_id
        super().__init__(message)


class CacheError(ServiceError):
    """Cache operation failed."""

    pass


class FetchErrorKind(str, Enum):
    """Why a call to the upstream provider failed."""

    RATE_LIMIT_EXHAUSTED = "RATE_LIMIT_EXHAUSTED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"  # non-429 HTTP error status
    NETWORK_ERROR = "NETWORK_ERROR"  # no response received
    REQUEST_ERROR = "REQUEST_ERROR"  # request never sent
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class FetchError(ServiceError):
    """Upstream provider call failed."""

    kind: FetchErrorKind

    def __init__(
        self, kind: FetchErrorKind, message: str, service_id: str | None = None
    ):
        self.kind = kind
        super().__init__(message, service_id=service_id)


class RateLimitError(FetchError):
    """Rate limit retries exhausted."""

    def __init__(self, service_id: str | None = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(
            FetchErrorKind.RATE_LIMIT_EXHAUSTED,
            "Max retries exceeded for rate limiting",
            service_id=service_id,
        )


class UpstreamError(FetchError):
    """Provider answered with an HTTP error status."""

    def __init__(
        self, status: int, status_text: str, service_id: str | None = None
    ):
        self.status = status
        self.status_text = status_text
        super().__init__(
            FetchErrorKind.UPSTREAM_ERROR,
            f"API Error: {status} - {status_text}",
            service_id=service_id,
        )


class NetworkError(FetchError):
    """Request was sent but no response came back."""

    def __init__(self, service_id: str | None = None):
        super().__init__(
            FetchErrorKind.NETWORK_ERROR,
            "Network Error: No response received",
            service_id=service_id,
        )


class RequestError(FetchError):
    """Request could not be built or sent."""

    def __init__(self, detail: str, service_id: str | None = None):
        self.detail = detail
        super().__init__(
            FetchErrorKind.REQUEST_ERROR,
            f"Request Error: {detail}",
            service_id=service_id,
        )


class MalformedResponseError(FetchError):
    """Provider response did not match the expected shape."""

    def __init__(self, detail: str, service_id: str | None = None):
        self.detail = detail
        super().__init__(
            FetchErrorKind.MALFORMED_RESPONSE,
            f"Malformed upstream response: {detail}",
            service_id=service_id,
        )
