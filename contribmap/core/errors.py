class ContribMapError(Exception):
    """Base class for every fatal contribmap error."""


class UsageError(ContribMapError):
    """Raised when command line input is missing or invalid."""


class TransportError(ContribMapError):
    """Raised when the platform cannot be reached."""


class UpstreamError(ContribMapError):
    """Raised when the platform answers with a non-success status.

    The response body is kept verbatim so it can be shown to the user.
    """

    def __init__(self, platform: str, status_code: int, body: str) -> None:
        super().__init__(f"{platform} API error ({status_code}): {body}")
        self.platform = platform
        self.status_code = status_code
        self.body = body


class InvalidTokenError(UpstreamError):
    """Raised when the platform rejects the provided token."""


class DecodeError(ContribMapError):
    """Raised when a platform response payload is malformed."""
