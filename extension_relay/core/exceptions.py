"""Custom exceptions for the extension relay core library."""


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RelayError):
    """Raised when the relay is missing required configuration (e.g. the upstream credential)."""

    pass


class InvalidRequestError(RelayError):
    """Raised when a caller request is missing a required field."""

    pass


class UpstreamError(RelayError):
    """Base class for upstream transport errors."""

    def __init__(self, message: str, upstream: str | None = None):
        self.upstream = upstream
        super().__init__(message)


class UpstreamUnreachableError(UpstreamError):
    """Raised when the inference API cannot be reached."""

    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when a configured upstream timeout expires."""

    pass
