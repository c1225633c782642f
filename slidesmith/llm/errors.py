"""
Error taxonomy shared by both wire protocols and both transports.

Every error carries a ``kind`` that survives the trip through the proxy
(``errorType`` in proxy payloads), so callers can tell a transport failure
from unparseable model output whichever transport was used.
"""

from __future__ import annotations


class SlideGenerationError(Exception):
    """Base class for all errors raised by the generation layer."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SlideGenerationError):
    kind = "configuration"


class UpstreamError(SlideGenerationError):
    """Non-2xx response or connection failure talking to a provider or proxy."""

    kind = "transport"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestTimeoutError(SlideGenerationError):
    kind = "timeout"

    def __init__(self, message: str, timeout: float | None = None) -> None:
        super().__init__(message)
        self.timeout = timeout

    @classmethod
    def after(cls, timeout: float) -> RequestTimeoutError:
        return cls(f"Request timeout after {timeout:g} seconds", timeout)


class StreamShapeError(SlideGenerationError):
    kind = "stream"


class MalformedOutputError(SlideGenerationError):
    """The model answered, but not with something we can use."""

    kind = "normalization"


class NoImageGeneratedError(MalformedOutputError):
    kind = "no_image"

    def __init__(self, message: str = "No image generated") -> None:
        super().__init__(message)


_ERRORS_BY_KIND: dict[str, type[SlideGenerationError]] = {
    ConfigurationError.kind: ConfigurationError,
    RequestTimeoutError.kind: RequestTimeoutError,
    UpstreamError.kind: UpstreamError,
    StreamShapeError.kind: StreamShapeError,
    MalformedOutputError.kind: MalformedOutputError,
    NoImageGeneratedError.kind: NoImageGeneratedError,
}


def error_from_kind(
    kind: str | None, message: str, status_code: int | None = None
) -> SlideGenerationError:
    """Rebuild a typed error from a proxy error payload."""
    if kind == UpstreamError.kind or kind is None:
        return UpstreamError(message, status_code)
    return _ERRORS_BY_KIND.get(kind, SlideGenerationError)(message)


def status_code_for(error: SlideGenerationError) -> int:
    """HTTP status the proxy uses when reporting an error as a JSON body."""
    if isinstance(error, ConfigurationError):
        return 400
    if isinstance(error, RequestTimeoutError):
        return 504
    return 502
