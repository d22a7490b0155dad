"""Exceptions raised by the healthcheck probe."""


class ProbeError(Exception):
    """Base class for failures that make a probe run unhealthy."""


class NetworkError(ProbeError):
    """Connection-level failure: refused, host not found, reset.

    Parameters
    ----------
    message : str
        Human-readable description of the failure
    cause_code : str
        Symbolic cause, e.g. ECONNREFUSED, ENOTFOUND or ECONNRESET

    """

    def __init__(self, message: str, cause_code: str) -> None:
        super().__init__(message)
        self.cause_code = cause_code


class ProbeTimeoutError(ProbeError):
    """The request did not complete within the configured timeout."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timed out after {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class BadStatusError(ProbeError):
    """A response was received but its status code is outside 2xx."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Invalid HTTP status: {status_code}")
        self.status_code = status_code
        self.body = body


class MalformedBodyError(ValueError):
    """The response body is not JSON. Never fatal."""
