"""Domain exceptions for the search filter.

Configuration errors are raised at construction time; decode and encode errors
are recovered per request by the middleware (fail closed); capability errors
propagate to whoever attempted the unsupported ASGI extension. Presentation
layer maps the rest to HTTP responses in exception handlers.
"""

from typing import Any


class SearchFilterException(Exception):
    """Base exception for all search filter errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable dict for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationException(SearchFilterException):
    """Raised when the middleware options are invalid (e.g. pattern fails to compile)."""

    def __init__(self, message: str, option: str | None = None) -> None:
        details = {"option": option} if option else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class DecodeException(SearchFilterException):
    """Raised when a captured body is not a valid search result."""

    def __init__(self, message: str = "Unable to decode search result") -> None:
        super().__init__(message, "DECODE_ERROR")


class EncodeException(SearchFilterException):
    """Raised when a filtered search result cannot be re-encoded."""

    def __init__(self, message: str = "Unable to encode search result") -> None:
        super().__init__(message, "ENCODE_ERROR")


class CapabilityException(SearchFilterException):
    """Raised when the server does not support an ASGI extension the app tried to use."""

    def __init__(self, capability: str) -> None:
        super().__init__(
            f"{capability} is not supported by the server",
            "CAPABILITY_ERROR",
            {"capability": capability},
        )


class UpstreamUnavailableException(SearchFilterException):
    """Raised when the upstream homeserver cannot be reached."""

    def __init__(self, upstream_url: str, reason: str | None = None) -> None:
        details: dict[str, Any] = {"upstream_url": upstream_url}
        if reason:
            details["reason"] = reason
        super().__init__("Upstream homeserver unavailable", "UPSTREAM_UNAVAILABLE", details)
